from .nest import nest_by
from .expand import crossing

__all__ = ["nest_by", "crossing"]
