from dataclasses import dataclass, field


@dataclass(frozen=True)
class ImageFile:
    """A scanned card image owned by a customer folder."""

    name: str
    content: bytes = field(repr=False)


@dataclass(frozen=True)
class FolderEntry:
    """One uploaded customer folder and its images, sorted by filename."""

    folder_name: str
    customer_name: str
    images: tuple[ImageFile, ...] = ()

    @property
    def image_names(self) -> list[str]:
        return [image.name for image in self.images]
