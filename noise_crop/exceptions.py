"""Custom exceptions for noise filtering and cropping."""


class NoiseCropError(Exception):
    """Base exception for noise filtering and cropping errors."""

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or message


class ImageReadError(NoiseCropError):
    """Failed to read input image."""

    def __init__(self, path: str):
        super().__init__(
            f"Could not read image: {path}",
            f"Could not read image file {path}. The file may be missing, corrupted or in an unsupported format.",
        )


class ImageWriteError(NoiseCropError):
    """Failed to encode or write output image."""

    def __init__(self, path: str, detail: str = ""):
        msg = f"Could not write image: {path}: {detail}" if detail else f"Could not write image: {path}"
        super().__init__(msg)


class InvalidThresholdError(NoiseCropError):
    """Threshold argument is not a floating point number."""

    def __init__(self, value: str):
        super().__init__(
            f"Invalid threshold: {value!r}",
            "Threshold is not a floating point number",
        )
