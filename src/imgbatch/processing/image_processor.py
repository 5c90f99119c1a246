"""
Image Processing Module

PIL/Pillow-based conversion engine. Decodes arbitrary image bytes by
sniffing their content and re-encodes the full pixel grid into PNG,
JPEG or WEBP at the encoder's default settings.
"""

import io
import logging
from typing import Dict, Any, Optional

from PIL import Image, UnidentifiedImageError

from imgbatch.processing.exceptions import ImageProcessingError, UnsupportedFormatError
from imgbatch.processing.formats import ImageFormat

# Everything Pillow is known to raise for damaged or hostile input
DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
    SyntaxError,
    EOFError,
)

ENCODE_ERRORS = (OSError, ValueError, KeyError, TypeError)


class ImageProcessor:
    """
    Byte-in, byte-out image converter.

    ``convert`` never raises for bad image data: any decode or encode
    failure is logged and reported as ``None`` so one broken item cannot
    stop a batch.
    """

    SUPPORTED_FORMATS = {f.value for f in ImageFormat}

    # JPEG has no alpha channel; transparent pixels land on this color
    JPEG_BACKGROUND = (255, 255, 255)

    def __init__(self):
        self.logger = logging.getLogger("imgbatch.processing.image")

    def convert(
        self,
        data: bytes,
        source_format: Optional[ImageFormat],
        target_mime: str
    ) -> Optional[bytes]:
        """
        Convert image bytes to the format identified by ``target_mime``.

        Args:
            data: Encoded image bytes
            source_format: Classified format, used for logging only; the
                decoder always sniffs the bytes
            target_mime: MIME type of the desired output

        Returns:
            Encoded output bytes, or None if decoding or encoding failed

        Raises:
            UnsupportedFormatError: If target_mime is not png, jpeg or webp
        """
        target_format = ImageFormat.from_mime(target_mime)
        if target_format is None:
            raise UnsupportedFormatError(
                target_mime, [f.mime for f in ImageFormat]
            )

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                self._log_mismatch(img, source_format)
                return self._encode(img, target_format)
        except DECODE_ERRORS as e:
            self.logger.warning(f"Could not decode image ({len(data)} bytes): {e}")
            return None

    def _encode(self, img: Image.Image, target_format: ImageFormat) -> Optional[bytes]:
        try:
            processed_img = self._prepare_image_for_format(img, target_format)
            output = io.BytesIO()
            processed_img.save(output, format=target_format.pil_format)
        except ENCODE_ERRORS as e:
            self.logger.warning(
                f"Could not encode {img.mode} {img.size[0]}x{img.size[1]} image "
                f"as {target_format.value}: {e}"
            )
            return None
        return output.getvalue()

    def _log_mismatch(self, img: Image.Image, source_format: Optional[ImageFormat]) -> None:
        if source_format is None or img.format is None:
            return
        detected = img.format.lower()
        if detected != source_format.value:
            self.logger.debug(
                f"Image labelled {source_format.value} decoded as {detected}"
            )

    def _prepare_image_for_format(self, img: Image.Image, target_format: ImageFormat) -> Image.Image:
        """
        Prepare image for specific output format (handle color modes).

        Args:
            img: Decoded PIL Image
            target_format: Target format

        Returns:
            Image in a mode the target encoder accepts
        """
        has_alpha = img.mode in ('RGBA', 'LA', 'PA') or 'transparency' in img.info

        if target_format is ImageFormat.JPEG:
            if has_alpha:
                rgba = img.convert('RGBA')
                background = Image.new('RGB', img.size, self.JPEG_BACKGROUND)
                background.paste(rgba, mask=rgba.getchannel('A'))
                img = background
            elif img.mode != 'RGB':
                img = img.convert('RGB')

        elif target_format is ImageFormat.PNG:
            if img.mode not in ('RGB', 'RGBA', 'L', 'LA'):
                img = img.convert('RGBA' if has_alpha else 'RGB')

        elif target_format is ImageFormat.WEBP:
            if img.mode not in ('RGB', 'RGBA'):
                img = img.convert('RGBA' if has_alpha else 'RGB')

        return img

    def get_image_info(self, data: bytes) -> Dict[str, Any]:
        """
        Get information about encoded image bytes.

        Args:
            data: Encoded image bytes

        Returns:
            Dictionary with format, mode, width, height and size_bytes

        Raises:
            ImageProcessingError: If the bytes cannot be decoded
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                return {
                    'format': (img.format or '').lower(),
                    'mode': img.mode,
                    'width': img.width,
                    'height': img.height,
                    'size_bytes': len(data),
                }
        except DECODE_ERRORS as e:
            self.logger.error(f"Failed to get image info: {e}")
            raise ImageProcessingError(f"Failed to read image: {e}", cause=e) from e
