from step_view.events import DEFAULT_KEY_BINDINGS, GalleryEvent, event_for_key


def test_every_event_has_a_key():
    assert set(DEFAULT_KEY_BINDINGS.values()) == set(GalleryEvent)


def test_default_bindings():
    assert event_for_key("Escape") is GalleryEvent.QUIT
    assert event_for_key("Right") is GalleryEvent.STEP_FORWARD
    assert event_for_key("Left") is GalleryEvent.STEP_BACKWARD
    assert event_for_key("Delete") is GalleryEvent.DELETE_CURRENT
    assert event_for_key("BackSpace") is GalleryEvent.DELETE_CURRENT
    assert event_for_key("Prior") is GalleryEvent.CONTRAST_UP
    assert event_for_key("s") is GalleryEvent.CROP_CURRENT


def test_unbound_key():
    assert event_for_key("q") is None


def test_custom_bindings():
    bindings = {"q": GalleryEvent.QUIT}
    assert event_for_key("q", bindings) is GalleryEvent.QUIT
    assert event_for_key("Escape", bindings) is None
