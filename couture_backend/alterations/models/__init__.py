from .alteration import Alteration

__all__ = ["Alteration"]
