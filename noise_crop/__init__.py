"""Median filtering and noise band cropping for raster images."""

__version__ = "0.1.0"


def __getattr__(name):
    """Lazy import to avoid loading cv2 when only parsing arguments."""
    if name in ("apply_median", "crop_noise", "analyze_noise", "process_image"):
        from .detection import analyze_noise, crop_noise
        from .filters import apply_median
        from .pipeline import process_image
        return {
            "apply_median": apply_median,
            "crop_noise": crop_noise,
            "analyze_noise": analyze_noise,
            "process_image": process_image,
        }[name]
    if name in ("CropBounds", "NoiseProfile", "Params"):
        from .models import CropBounds, NoiseProfile, Params
        return {"CropBounds": CropBounds, "NoiseProfile": NoiseProfile, "Params": Params}[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "apply_median",
    "crop_noise",
    "analyze_noise",
    "process_image",
    "CropBounds",
    "NoiseProfile",
    "Params",
]
