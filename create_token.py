"""Print a long-lived access token, e.g. for scripts or smoke tests.

Usage:
    python create_token.py --email admin@example.com --user-id 1 --role admin --days 365
"""
import argparse

from shop_services.core.security import ROLE_ADMIN, ROLE_USER, create_access_token


def main(argv=None) -> None:
    ap = argparse.ArgumentParser(description="Create a signed access token.")
    ap.add_argument("--email", required=True, help="Token subject (user email)")
    ap.add_argument("--user-id", type=int, required=True, help="ID of the user in the users service")
    ap.add_argument("--role", choices=(ROLE_ADMIN, ROLE_USER), default=ROLE_ADMIN)
    ap.add_argument("--days", type=int, default=365, help="Lifetime in days")
    args = ap.parse_args(argv)

    token = create_access_token(
        {"sub": args.email, "user_id": args.user_id, "role": args.role},
        expires_delta=args.days * 24 * 60 * 60,
    )
    print(token)


if __name__ == "__main__":
    main()
