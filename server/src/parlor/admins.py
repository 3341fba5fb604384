"""Administrator credentials.

The admins table is provisioned outside the application, which only reads
it. Passwords are stored as hex SHA-256 digests.
"""

import hmac

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parlor.db import Admin
from parlor.hashing import hash_password


class AdminStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def verify(self, username: str, password: str) -> bool:
        """Whether the username exists and the password matches it."""
        result = await self.db.execute(
            select(Admin.password_hash).where(Admin.username == username)
        )
        wanted = result.scalar_one_or_none()
        if wanted is None:
            return False
        return hmac.compare_digest(wanted, hash_password(password))

    async def add(self, username: str, password: str) -> Admin:
        """Provision an administrator. Used by deployment scripts and tests."""
        admin = Admin(username=username, password_hash=hash_password(password))
        self.db.add(admin)
        await self.db.commit()
        return admin
