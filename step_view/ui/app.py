"""Main Tkinter application for StepView."""
import tkinter as tk
from tkinter import messagebox
from typing import Optional
import logging

from PIL import Image, ImageTk

from ..events import GalleryEvent, event_for_key
from ..image_ops import fit_within
from ..repository import RepositoryError
from ..services import GalleryService, UserFacingError

logger = logging.getLogger(__name__)

# Modes ImageTk.PhotoImage can show without conversion
_DISPLAY_MODES = ('1', 'L', 'P', 'RGB', 'RGBA')


class ImageSurface(tk.Canvas):
    """Canvas that shows one image at a time, fitted to the window and centred."""

    def __init__(self, master, **kwargs):
        super().__init__(master, background="black", highlightthickness=0, **kwargs)
        self._staged: Optional[Image.Image] = None
        self._message: Optional[str] = None
        self._photo = None  # Keep a reference so Tk doesn't drop the image
        self.bind("<Configure>", lambda e: self.publish())

    def upload(self, image: Image.Image) -> None:
        """Stage an image for the next publish()."""
        self._staged = image
        self._message = None

    def show_message(self, text: str) -> None:
        """Stage a text placeholder instead of an image."""
        self._staged = None
        self._message = text

    def publish(self) -> None:
        """Draw whatever is staged."""
        self.delete("all")
        width = self.winfo_width()
        height = self.winfo_height()
        if width <= 1 or height <= 1:
            # Not mapped yet; <Configure> will publish again
            return

        if self._staged is None:
            if self._message:
                self.create_text(
                    width // 2,
                    height // 2,
                    text=self._message,
                    font=("Arial", 14),
                    fill="gray",
                    justify=tk.CENTER
                )
            return

        shown = fit_within(self._staged, width, height)
        if shown.mode not in _DISPLAY_MODES:
            shown = shown.convert("RGB")
        self._photo = ImageTk.PhotoImage(shown)
        self.create_image(width // 2, height // 2, anchor=tk.CENTER, image=self._photo)


class StepViewApp(tk.Tk):
    """Main application window."""

    def __init__(self, service: GalleryService):
        """
        Initialize the application.

        Args:
            service: Gallery service with images already loaded
        """
        super().__init__()

        self.service = service
        self.exit_code = 0

        self.setup_window()
        self.create_widgets()
        self.create_key_bindings()

        self.after_idle(self.show_current_image)

    def setup_window(self):
        """Set up the main window."""
        settings = self.service.settings
        self.title("StepView")
        self.geometry(f"{settings.max_width}x{settings.max_height}")
        self.configure(background="black")
        self.protocol("WM_DELETE_WINDOW", self.close)

    def create_widgets(self):
        """Create the image surface and the status line."""
        self.counter_label = tk.Label(self, text="0 / 0", anchor=tk.W, font=("Arial", 10))
        self.counter_label.pack(side=tk.BOTTOM, fill=tk.X)

        self.surface = ImageSurface(self)
        self.surface.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

    def create_key_bindings(self):
        """Create keyboard bindings."""
        # Act on release, one event per key stroke
        self.bind("<KeyRelease>", self.on_key_release)
        self.surface.focus_set()

    def on_key_release(self, event):
        gallery_event = event_for_key(event.keysym)
        if gallery_event is None:
            return
        self.dispatch(gallery_event)

    def dispatch(self, event: GalleryEvent):
        """Run one gallery event and redraw."""
        try:
            keep_running = self.service.handle_event(event)
        except UserFacingError as e:
            messagebox.showerror("Error", str(e), parent=self)
            self.show_current_image()
            return
        except RepositoryError as e:
            self.fail(e)
            return

        if not keep_running:
            self.close()
            return
        self.show_current_image()

    def show_current_image(self):
        """Display the current image."""
        try:
            image = self.service.current_image()
        except RepositoryError as e:
            self.fail(e)
            return

        if image is None:
            self.surface.show_message("No images left.\n\nPress Escape to quit.")
        else:
            self.surface.upload(image)
        self.surface.publish()
        self.update_counter()

    def update_counter(self):
        """Update the image counter display."""
        state = self.service.state
        path = state.current_path()
        if path is None:
            self.counter_label.config(text="0 / 0")
            return
        self.counter_label.config(text=f"{state.cursor + 1} / {len(state)}    {path.name}")

    def fail(self, error: Exception):
        """Report an error the session cannot recover from and shut down."""
        logger.error(f"Stopping session: {error}")
        messagebox.showerror("Fatal error", str(error), parent=self)
        self.exit_code = 1
        self.close()

    def close(self):
        """Handle window closing."""
        logger.info(f"Session finished: {self.service.summary()}")
        self.destroy()

    def run(self) -> int:
        """Run the event loop until the window closes; returns the exit code."""
        self.mainloop()
        return self.exit_code
