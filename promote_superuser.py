# promote_superuser.py — grant dashboard admin rights to an existing account
import asyncio
import sys

from sqlalchemy import select

from db_async import session_scope
from models_user import User

async def promote(email: str) -> bool:
    async with session_scope() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if not user:
            print(f"No user found with email {email}", file=sys.stderr)
            return False
        user.is_superuser = True
        await session.commit()
        print(f"{email} is now an admin")
        return True

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python promote_superuser.py <email>")
        sys.exit(2)
    sys.exit(0 if asyncio.run(promote(sys.argv[1])) else 1)
