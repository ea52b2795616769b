"""Debug visualization utilities for noise filtering and cropping."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import cv2
import numpy as np

if TYPE_CHECKING:
    from .models import CropBounds, NoiseProfile


class DebugVisualizer:
    """Saves debug images at each step of the pipeline."""

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)
        if self.output_dir.exists():
            # Backup existing debug dir before cleaning
            backup_dir = self.output_dir.with_suffix(".bak")
            if backup_dir.exists():
                import shutil

                shutil.rmtree(backup_dir)
            self.output_dir.rename(backup_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.step = 0

    def _save(self, name: str, img: np.ndarray):
        """Save an RGBA image as the next numbered step."""
        self.step += 1
        filename = f"{self.step:02d}_{name}.png"
        cv2.imwrite(str(self.output_dir / filename), cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA))

    def save_input(self, img: np.ndarray):
        self._save("input", img)

    def save_median_filter(self, img_before: np.ndarray, img_after: np.ndarray):
        """Save before/after median filter side by side."""
        separator = np.zeros((img_before.shape[0], 4, 4), dtype=np.uint8)
        separator[:, :, 1] = 255
        separator[:, :, 3] = 255
        self._save("median_filter", np.hstack([img_before, separator, img_after]))

    def save_noise_profile(self, profile: NoiseProfile):
        """Save row noise plot and the signal as CSV.

        The plot shows noise energy per row with the adaptive threshold and
        every crossing row. The CSV has one line per row.
        """
        import matplotlib.pyplot as plt
        import pandas as pd

        crossing = np.zeros(len(profile.noise), dtype=bool)
        crossing[profile.crossings] = True
        df = pd.DataFrame({
            "row": np.arange(len(profile.noise)),
            "noise": profile.noise,
            "above_threshold": profile.above_threshold,
            "crossing": crossing,
        })
        df.to_csv(self.output_dir / "noise_profile.csv", index=False)

        fig, ax = plt.subplots(figsize=(10, 4))
        ax.plot(df["row"], df["noise"], linewidth=1, label="noise")
        ax.axhline(
            y=profile.threshold_value,
            color="red",
            linestyle="--",
            label=f"threshold={profile.threshold_value}",
        )
        for row in df.loc[df["crossing"], "row"]:
            ax.axvline(x=row, color="orange", alpha=0.6)

        bounds = profile.bounds
        if bounds is not None:
            ax.axvspan(bounds.top, bounds.bottom, color="green", alpha=0.15, label="kept rows")

        ax.set_xlabel("Row")
        ax.set_ylabel("Noise energy")
        ax.set_xlim(0, max(len(df) - 1, 1))
        ax.set_title(
            f"Row noise (min={profile.noise_min}, max={profile.noise_max}, "
            f"crossings={len(profile.crossings)})"
        )
        ax.legend()
        fig.tight_layout()
        self.step += 1
        fig.savefig(self.output_dir / f"{self.step:02d}_noise_profile.png", dpi=100)
        plt.close(fig)

    def save_crop_bounds(self, img: np.ndarray, bounds: CropBounds | None):
        """Save image with discarded rows shaded and kept band outlined."""
        vis = img.copy()
        vis[:, :, 3] = 255
        img_h, img_w = img.shape[:2]

        if bounds is not None:
            overlay = vis.copy()
            overlay[:bounds.top, :] = (128, 0, 0, 255)
            overlay[bounds.bottom:, :] = (128, 0, 0, 255)
            cv2.addWeighted(overlay, 0.5, vis, 0.5, 0, vis)
            cv2.rectangle(vis, (0, bounds.top), (img_w - 1, max(bounds.bottom - 1, bounds.top)), (0, 255, 0, 255), 1)
            label = f"rows {bounds.top}-{bounds.bottom} of {img_h}"
        else:
            label = "no crossings, image kept"

        cv2.putText(vis, label, (5, 15), cv2.FONT_HERSHEY_SIMPLEX, 0.4, (255, 255, 0, 255), 1)
        self._save("crop_bounds", vis)

    def save_coords_output(
        self,
        img: np.ndarray,
        bounds: CropBounds,
        top_frac: float,
        bottom_frac: float,
    ):
        """Save visualization of final coords output on the image.

        Args:
            img: Image the bounds were detected on
            bounds: Pixel rows [top, bottom)
            top_frac, bottom_frac: Fractional coordinates (0.0-1.0)
        """
        vis = img.copy()
        vis[:, :, 3] = 255
        img_h, img_w = img.shape[:2]

        cv2.line(vis, (0, bounds.top), (img_w - 1, bounds.top), (0, 255, 0, 255), 1)
        cv2.line(vis, (0, bounds.bottom), (img_w - 1, bounds.bottom), (0, 255, 0, 255), 1)

        cv2.putText(vis, f"Image size: {img_w} x {img_h}", (5, 15),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.4, (255, 255, 255, 255), 1)
        cv2.putText(vis, f"Pixel: T={bounds.top} B={bounds.bottom}", (5, 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.4, (255, 255, 255, 255), 1)
        cv2.putText(vis, f"Frac:  T={top_frac:.4f} B={bottom_frac:.4f}", (5, 45),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.4, (255, 255, 255, 255), 1)

        self._save("coords_output", vis)
