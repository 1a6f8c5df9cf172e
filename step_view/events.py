"""Input events understood by the gallery and their default key bindings."""
from enum import Enum
from typing import Dict, Optional


class GalleryEvent(Enum):
    QUIT = "quit"
    STEP_FORWARD = "step_forward"
    STEP_BACKWARD = "step_backward"
    DELETE_CURRENT = "delete_current"
    BRIGHTNESS_UP = "brightness_up"
    BRIGHTNESS_DOWN = "brightness_down"
    CONTRAST_UP = "contrast_up"
    CONTRAST_DOWN = "contrast_down"
    CROP_CURRENT = "crop_current"


# Tk keysyms; Prior/Next are Page Up/Page Down
DEFAULT_KEY_BINDINGS: Dict[str, GalleryEvent] = {
    "Escape": GalleryEvent.QUIT,
    "Right": GalleryEvent.STEP_FORWARD,
    "Left": GalleryEvent.STEP_BACKWARD,
    "Delete": GalleryEvent.DELETE_CURRENT,
    "BackSpace": GalleryEvent.DELETE_CURRENT,
    "Up": GalleryEvent.BRIGHTNESS_UP,
    "Down": GalleryEvent.BRIGHTNESS_DOWN,
    "Prior": GalleryEvent.CONTRAST_UP,
    "Next": GalleryEvent.CONTRAST_DOWN,
    "s": GalleryEvent.CROP_CURRENT,
}


def event_for_key(keysym: str, bindings: Optional[Dict[str, GalleryEvent]] = None) -> Optional[GalleryEvent]:
    """Look up the gallery event bound to a key, or None if the key is unbound."""
    bindings = DEFAULT_KEY_BINDINGS if bindings is None else bindings
    return bindings.get(keysym)
