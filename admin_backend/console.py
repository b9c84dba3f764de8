"""Command-line admin console.

Usage:
    python -m admin_backend.console login admin@example.com
    python -m admin_backend.console bookings --status completed --from 2024-01-01 --to 2024-01-31
    python -m admin_backend.console watch
"""
import argparse
import getpass
import json
import sys
from datetime import date

from admin_backend.client.errors import AdminApiError
from admin_backend.client.session_client import AdminSessionClient
from admin_backend.models.booking import BookingStatus
from admin_backend.models.tutor_application import ApplicationStatus
from admin_backend.reporting.filters import (
    ALL,
    booking_end_time,
    filter_bookings_by_date,
    filter_bookings_by_status,
    to_datetime,
    with_normalized_status,
)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _format_booking(booking: dict) -> str:
    start = to_datetime(booking.get('startAt'))
    end = booking_end_time(booking)
    when = start.strftime('%Y-%m-%d %H:%M') if start else '?'
    if end:
        when += end.strftime('-%H:%M')
    package_type = booking.get('packageType')
    if package_type and package_type != 'single':
        progress = f"{booking.get('completedSessions') or 0}/{booking.get('totalSessions') or 0} sessions"
    else:
        progress = f"{booking.get('price', '-')}"
    return '  '.join([
        booking.get('id', ''),
        booking.get('studentName') or booking.get('studentId') or '?',
        booking.get('tutorName') or booking.get('tutorId') or '?',
        when,
        str(booking.get('mode') or '-'),
        progress,
        booking['status'],
    ])


def cmd_login(client: AdminSessionClient, args) -> None:
    password = args.password or getpass.getpass('Password: ')
    admin = client.login(args.email, password)
    print(f"Logged in as {admin['displayName']} <{admin['email']}>")


def cmd_logout(client: AdminSessionClient, args) -> None:
    client.logout()
    print('Logged out.')


def cmd_me(client: AdminSessionClient, args) -> None:
    admin = client.restore_session()
    if admin is None:
        print('Not logged in.')
        return
    _print_json(admin)


def cmd_users(client: AdminSessionClient, args) -> None:
    for user in client.list_users(role=args.role):
        state = 'blocked' if user.get('isBlocked') else 'active'
        print(f"{user['uid']}  {user.get('email', '')}  {user.get('displayName') or '-'}  {user.get('role')}  {state}")


def cmd_block(client: AdminSessionClient, args) -> None:
    print(client.set_blocked(args.uid, args.command == 'block'))


def cmd_applications(client: AdminSessionClient, args) -> None:
    status = None if args.status == ALL else args.status
    for application in client.list_tutor_applications(status=status):
        print(
            f"{application['id']}  {application.get('fullName') or '-'}  {application.get('email') or '-'}  "
            f"{application.get('subject') or '-'}  {application.get('status')}"
        )


def cmd_review(client: AdminSessionClient, args) -> None:
    decision = ApplicationStatus.APPROVED.value if args.command == 'approve' else ApplicationStatus.REJECTED.value
    print(client.review_application(args.application_id, decision))


def cmd_bookings(client: AdminSessionClient, args) -> None:
    bookings = with_normalized_status(client.list_bookings(status=args.raw_status))
    bookings = filter_bookings_by_status(bookings, args.status)
    bookings = filter_bookings_by_date(bookings, date_from=args.date_from, date_to=args.date_to)
    print(f'{len(bookings)} booking(s)')
    for booking in bookings:
        print(_format_booking(booking))


def cmd_delete_booking(client: AdminSessionClient, args) -> None:
    print(client.delete_booking(args.booking_id))


def cmd_dashboard(client: AdminSessionClient, args) -> None:
    _print_json(client.dashboard(year=args.year))


def cmd_watch(client: AdminSessionClient, args) -> None:
    try:
        for summary in client.stream_dashboard(year=args.year):
            print(
                f"accounts={summary['totalAccounts']} bookings={summary['totalBookings']} "
                f"completed={summary['completedBookings']} cancelled={summary['cancelledBookings']} "
                f"revenue={summary['totalRevenue']}"
            )
    except KeyboardInterrupt:
        pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Tutor marketplace admin console')
    parser.add_argument('--api', default=None, help='Admin API base URL (default: ADMIN_API_BASE_URL)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    login = subparsers.add_parser('login', help='Log in and store the session')
    login.add_argument('email')
    login.add_argument('--password', help='Prompted for when omitted')
    login.set_defaults(handler=cmd_login)

    subparsers.add_parser('logout', help='Revoke and forget the stored session').set_defaults(handler=cmd_logout)
    subparsers.add_parser('me', help='Show the logged in admin').set_defaults(handler=cmd_me)

    users = subparsers.add_parser('users', help='List accounts')
    users.add_argument('--role', choices=['student', 'tutor', 'admin'])
    users.set_defaults(handler=cmd_users)

    for name in ('block', 'unblock'):
        block = subparsers.add_parser(name, help=f'{name.capitalize()} an account')
        block.add_argument('uid')
        block.set_defaults(handler=cmd_block)

    applications = subparsers.add_parser('applications', help='List tutor applications')
    applications.add_argument(
        '--status',
        default=ApplicationStatus.PENDING.value,
        choices=[status.value for status in ApplicationStatus] + [ALL],
    )
    applications.set_defaults(handler=cmd_applications)

    for name in ('approve', 'reject'):
        review = subparsers.add_parser(name, help=f'{name.capitalize()} a tutor application')
        review.add_argument('application_id')
        review.set_defaults(handler=cmd_review)

    bookings = subparsers.add_parser('bookings', help='List bookings')
    bookings.add_argument('--status', default=ALL, choices=[status.value for status in BookingStatus] + [ALL])
    bookings.add_argument('--raw-status', help='Stored status to filter on server side')
    bookings.add_argument('--from', dest='date_from', type=date.fromisoformat, help='YYYY-MM-DD, inclusive')
    bookings.add_argument('--to', dest='date_to', type=date.fromisoformat, help='YYYY-MM-DD, inclusive')
    bookings.set_defaults(handler=cmd_bookings)

    delete_booking = subparsers.add_parser('delete-booking', help='Delete a booking')
    delete_booking.add_argument('booking_id')
    delete_booking.set_defaults(handler=cmd_delete_booking)

    for name, handler in (('dashboard', cmd_dashboard), ('watch', cmd_watch)):
        dashboard = subparsers.add_parser(name, help='Show dashboard statistics' if name == 'dashboard' else 'Follow live dashboard statistics')
        dashboard.add_argument('--year', type=int)
        dashboard.set_defaults(handler=handler)

    return parser


def main(argv=None, client: AdminSessionClient | None = None) -> int:
    args = build_parser().parse_args(argv)
    client = client or AdminSessionClient(base_url=args.api)
    try:
        args.handler(client, args)
    except AdminApiError as e:
        print(f'Error ({e.status_code}): {e.message}', file=sys.stderr)
        return 1
    finally:
        client.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
