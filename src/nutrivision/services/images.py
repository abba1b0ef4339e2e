"""Process-local store for uploaded meal photos."""

from dataclasses import dataclass, field

from nutrivision.domain.vision import UploadedImage


@dataclass
class TransientImageStore:
    """Keeps the most recent uploaded images in memory only.

    At most ``capacity`` images are held; the oldest is dropped first.
    Nothing survives a restart.
    """

    capacity: int = 20
    _images: dict[int, UploadedImage] = field(default_factory=dict)

    def put(self, meal_id: int, image: UploadedImage) -> str:
        """Keep an image and return the URL path it is served from."""
        self._images.pop(meal_id, None)
        self._images[meal_id] = image
        while len(self._images) > self.capacity:
            del self._images[next(iter(self._images))]
        return f"/meals/{meal_id}/image"

    def get(self, meal_id: int) -> UploadedImage | None:
        """Return the image for a meal while it is still held."""
        return self._images.get(meal_id)

    def clear(self) -> None:
        self._images.clear()
