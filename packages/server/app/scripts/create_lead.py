"""
Create (or promote) a lead account.

    python -m app.scripts.create_lead --email you@example.com --password secret [--name "You"]
"""

import argparse
import asyncio
from typing import Optional

from sqlmodel import select

from app.core.database import get_session_context, init_db
from app.models.user import User
from app.models.user_role import UserRole
from app.services.users import add_user
from opsdesk_shared.schemas.common import Role


async def create_lead(email: str, password: str, name: Optional[str] = None) -> tuple[User, bool]:
    """Return the lead user and whether it was newly created."""
    await init_db()

    async with get_session_context() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None:
            user = await add_user(session, email, password, name, Role.LEAD)
            return user, True

        result = await session.execute(select(UserRole).where(UserRole.user_id == user.id))
        role_row = result.scalar_one_or_none()
        if role_row is None:
            session.add(UserRole(user_id=user.id, role=Role.LEAD.value))
        else:
            role_row.role = Role.LEAD.value
            session.add(role_row)
        return user, False


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Create or promote a lead user.")
    parser.add_argument("--email", required=True, help="Email address for the user")
    parser.add_argument("--password", required=True, help="Initial password (new users only)")
    parser.add_argument("--name", default=None, help="Full name")

    args = parser.parse_args(argv)

    user, created = asyncio.run(create_lead(args.email, args.password, args.name))
    if created:
        print(f"Created lead: {user.email} ({user.id})")
    else:
        print(f"Promoted existing user to lead: {user.email} ({user.id})")


if __name__ == "__main__":
    main()
