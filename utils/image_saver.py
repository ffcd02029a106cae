import os
from datetime import datetime
from threading import Lock

from PIL import Image

from config.path_config import screenshots_dir as default_screenshots_dir
from utils.decorators import singleton
from utils.logger import get_logger

logger = get_logger("image_saver")


@singleton
class ImageSaver:
    """
    Singleton class to save images to a designated screenshots directory.

    Each saved image can have a timestamp appended to its filename.
    """

    def __init__(self, screenshots_dir=default_screenshots_dir, timestamp_format="%Y%m%d_%H%M%S"):
        self.screenshots_dir = screenshots_dir
        self.timestamp_format = timestamp_format
        self.lock = Lock()
        os.makedirs(self.screenshots_dir, exist_ok=True)

    def save_image(self, image, filename, timestamped=True):
        """
        Save a PIL Image object to the screenshots directory.

        Parameters:
            image (PIL.Image): The image to be saved.
            filename (str): The base filename for the image.
            timestamped (bool): If True, a timestamp is appended to the filename.

        Returns:
            str: The path the image was written to.
        """
        with self.lock:
            if timestamped:
                timestamp = datetime.now().strftime(self.timestamp_format)

                # Default to .png if no extension is provided
                name, ext = os.path.splitext(filename)
                if not ext:
                    ext = ".png"
                filename = f"{name}_{timestamp}{ext}"

            file_path = os.path.join(self.screenshots_dir, filename)
            image.save(file_path)

            logger.info("Image saved to %s", file_path)
            return file_path

    def save_framebuffer(self, pixels, width, height, filename="still_life", timestamped=True):
        """
        Save raw RGB rows read back with glReadPixels. OpenGL returns the bottom
        row first, so the image is flipped before saving.
        """
        image = Image.frombytes("RGB", (width, height), bytes(pixels))
        image = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
        return self.save_image(image, filename, timestamped=timestamped)
