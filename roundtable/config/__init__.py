from roundtable.config.settings import settings

__all__ = ["settings"]
