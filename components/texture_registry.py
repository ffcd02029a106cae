from dataclasses import dataclass

from OpenGL.GL import *
from PIL import Image

from utils.logger import get_logger

logger = get_logger("texture_registry")

# Returned by the lookups when a tag has not been registered.
NOT_FOUND = -1

# Fragment shaders are guaranteed at least 16 texture image units.
MAX_TEXTURE_SLOTS = 16

# channels -> (internal format, pixel format, Pillow mode)
PIXEL_FORMATS = {
    3: (GL_RGB8, GL_RGB, "RGB"),
    4: (GL_RGBA8, GL_RGBA, "RGBA"),
}


@dataclass(frozen=True)
class TextureEntry:
    """A texture uploaded to the GPU and the slot it is bound to."""

    tag: str
    handle: int
    slot: int
    width: int
    height: int
    channels: int


def decode_image(path, flip_vertically=True):
    """
    Decode an image file into raw 8-bit pixel rows.

    Images are flipped vertically by default so that the first row is the
    bottom of the picture, which is what glTexImage2D expects.

    Args:
        path (str): Path to the image file.
        flip_vertically (bool): Flip the rows before returning them.

    Returns:
        tuple: (width, height, channels, pixel bytes). Pixel bytes are only
        meaningful when channels is 3 or 4.

    Raises:
        OSError: If the file is missing or cannot be decoded.
        PIL.Image.DecompressionBombError: If the image exceeds Image.MAX_IMAGE_PIXELS.
    """
    with Image.open(path) as image:
        image.load()
        if image.mode in ("P", "PA"):
            # Palette images expand to RGB, or RGBA when they carry transparency
            has_alpha = image.mode == "PA" or "transparency" in image.info
            image = image.convert("RGBA" if has_alpha else "RGB")
        channels = len(image.getbands())
        if channels not in PIXEL_FORMATS:
            return image.width, image.height, channels, b""

        mode = PIXEL_FORMATS[channels][2]
        if image.mode != mode:
            # e.g. YCbCr or CMYK JPEGs
            image = image.convert(mode)
        if flip_vertically:
            image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        return image.width, image.height, channels, image.tobytes()


class TextureRegistry:
    """
    Loads image files into OpenGL textures and tags each one with a string key.

    Textures are assigned texture unit slots in load order (first load is
    slot 0). Tags are unique, the number of slots is bounded by max_slots and
    entries are never removed individually.
    """

    def __init__(self, max_slots=MAX_TEXTURE_SLOTS, flip_vertically=True):
        self.max_slots = max_slots
        self.flip_vertically = flip_vertically
        self.entries = {}

    def __len__(self):
        return len(self.entries)

    def __contains__(self, tag):
        return tag in self.entries

    def __iter__(self):
        return iter(self.entries.values())

    @property
    def tags(self):
        return list(self.entries)

    # --------------------------------------------------------------------------
    # Loading
    # --------------------------------------------------------------------------
    def load(self, path, tag):
        """
        Decode an image, upload it as a mipmapped 2D texture and register it under tag.

        Args:
            path (str): Image file to load.
            tag (str): Key used to look the texture up later.

        Returns:
            bool: True if the texture was uploaded and registered, False otherwise.
        """
        if tag in self.entries:
            logger.warning("Texture tag '%s' is already registered; ignoring %s", tag, path)
            return False

        if len(self.entries) >= self.max_slots:
            logger.error("No free texture slot for '%s' (%d slots in use)", tag, self.max_slots)
            return False

        try:
            width, height, channels, pixels = decode_image(path, self.flip_vertically)
        except (OSError, Image.DecompressionBombError) as exc:
            logger.error("Could not load image: %s (%s)", path, exc)
            return False

        if channels not in PIXEL_FORMATS:
            logger.error("Not implemented to handle image with %d channels: %s", channels, path)
            return False

        logger.info(
            "Successfully loaded image: %s, width: %d, height: %d, channels: %d", path, width, height, channels
        )

        handle = self._upload(width, height, channels, pixels)
        self.entries[tag] = TextureEntry(
            tag=tag,
            handle=int(handle),
            slot=len(self.entries),
            width=width,
            height=height,
            channels=channels,
        )
        return True

    def _upload(self, width, height, channels, pixels):
        """
        Create the GL texture object, configure wrapping/filtering and generate mipmaps.
        """
        internal_format, pixel_format, _ = PIXEL_FORMATS[channels]

        texture = glGenTextures(1)
        glBindTexture(GL_TEXTURE_2D, texture)

        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_S, GL_REPEAT)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_WRAP_T, GL_REPEAT)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MIN_FILTER, GL_LINEAR)
        glTexParameteri(GL_TEXTURE_2D, GL_TEXTURE_MAG_FILTER, GL_LINEAR)

        # RGB rows are not 4-byte aligned for every width
        glPixelStorei(GL_UNPACK_ALIGNMENT, 1)
        glTexImage2D(GL_TEXTURE_2D, 0, internal_format, width, height, 0, pixel_format, GL_UNSIGNED_BYTE, pixels)
        glGenerateMipmap(GL_TEXTURE_2D)

        glBindTexture(GL_TEXTURE_2D, 0)
        return texture

    # --------------------------------------------------------------------------
    # Binding and Cleanup
    # --------------------------------------------------------------------------
    def bind_all(self):
        """
        Bind every registered texture to the texture unit matching its slot.
        Call once after all textures have been loaded.
        """
        for entry in self.entries.values():
            glActiveTexture(GL_TEXTURE0 + entry.slot)
            glBindTexture(GL_TEXTURE_2D, entry.handle)

    def destroy_all(self):
        """
        Delete every registered GL texture and empty the registry.
        """
        handles = [entry.handle for entry in self.entries.values()]
        if handles:
            glDeleteTextures(len(handles), handles)
        self.entries.clear()

    # --------------------------------------------------------------------------
    # Lookup
    # --------------------------------------------------------------------------
    def find_handle(self, tag):
        """
        Return the GL texture name registered under tag, or NOT_FOUND.
        """
        entry = self.entries.get(tag)
        return entry.handle if entry else NOT_FOUND

    def find_slot(self, tag):
        """
        Return the texture unit slot registered under tag, or NOT_FOUND.
        """
        entry = self.entries.get(tag)
        return entry.slot if entry else NOT_FOUND
