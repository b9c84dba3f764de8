"""Create or update an admin account with a bcrypt password hash.

Usage:
    python -m admin_backend.set_admin_password admin@example.com 'new password'
"""
import argparse
import sys

from google.cloud.firestore_v1.base_query import FieldFilter

from admin_backend.auth.passwords import BCRYPT_MAX_PASSWORD_BYTES, hash_password
from admin_backend.database import USERS_COLLECTION, get_firestore_client
from admin_backend.models.account import AccountRole


def set_admin_password(db, email: str, password: str, display_name: str | None = None) -> str:
    """Store ``password`` for the account with ``email``, promoting it to admin.

    Returns the account uid. A new account document is created when no
    account has that email.
    """
    users = db.collection(USERS_COLLECTION)
    existing = next(iter(users.where(filter=FieldFilter('email', '==', email)).limit(1).stream()), None)

    fields = {
        'email': email,
        'role': AccountRole.ADMIN.value,
        'hashedPassword': hash_password(password),
    }
    if display_name:
        fields['displayName'] = display_name

    if existing is not None:
        existing.reference.set(fields, merge=True)
        return existing.id

    document = users.document()
    document.set({'displayName': display_name or 'Admin', 'isBlocked': False, **fields})
    return document.id


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description='Set the password of an admin account.')
    parser.add_argument('email')
    parser.add_argument('password')
    parser.add_argument('--display-name')
    args = parser.parse_args(argv)

    if len(args.password) < 8:
        print('Password must be at least 8 characters.', file=sys.stderr)
        sys.exit(1)
    if len(args.password.encode('utf-8')) > BCRYPT_MAX_PASSWORD_BYTES:
        print(f'Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes.', file=sys.stderr)
        sys.exit(1)

    uid = set_admin_password(get_firestore_client(), args.email.strip(), args.password, args.display_name)
    print(f'Admin account {uid} updated.')


if __name__ == '__main__':
    main()
