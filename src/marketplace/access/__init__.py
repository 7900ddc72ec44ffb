from marketplace.access.actor import Actor, Capabilities, Role

__all__ = ["Actor", "Capabilities", "Role"]
