from .menu import MenuLoop, MenuState

__all__ = ["MenuLoop", "MenuState"]
