"""Template variables shown on the main page."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parlor.db import TemplateVariable, upsert

WELCOME_MESSAGE = "welcome_message"


class TemplateVariables:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_welcome_message(self) -> str:
        """The current welcome message, or an empty one if it was never set."""
        result = await self.db.execute(
            select(TemplateVariable.value).where(TemplateVariable.name == WELCOME_MESSAGE)
        )
        return result.scalar_one_or_none() or ""

    async def set_welcome_message(self, message: str) -> None:
        stmt = upsert(self.db, TemplateVariable).values(name=WELCOME_MESSAGE, value=message)
        stmt = stmt.on_conflict_do_update(
            index_elements=["name"],
            set_={"value": stmt.excluded.value},
        )
        await self.db.execute(stmt)
        await self.db.commit()
