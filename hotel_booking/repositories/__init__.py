"""
Persistence accessors.

Thin async query functions over an AsyncSession. Joined relationships are
loaded eagerly and explicitly here, because lazy loading is not available
under asyncio.
"""
