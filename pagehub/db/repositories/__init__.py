from pagehub.db.repositories.page_repository import PageRepository

__all__ = ["PageRepository"]
