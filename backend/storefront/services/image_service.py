# Overview: Cloudinary delivery URLs and direct-upload settings.

from __future__ import annotations

from flask import current_app

CLOUDINARY_BASE = "https://res.cloudinary.com"

CLOUDINARY_PRESETS = {
    "thumbnail": {"width": 300, "height": 375, "crop": "fill", "quality": "auto", "format": "auto"},
    "main": {"width": 800, "height": 1000, "crop": "fill", "quality": "auto", "format": "auto"},
    "gallery": {"width": 1200, "height": 1500, "crop": "fill", "quality": "auto", "format": "auto"},
}

VALID_CROPS = {"fill", "fit", "scale"}


def cloudinary_url(
    public_id: str,
    *,
    width: int | None = None,
    height: int | None = None,
    crop: str | None = None,
    quality: str | int | None = None,
    format: str | None = None,
    cloud_name: str | None = None,
) -> str:
    """Delivery URL with an optional w_/h_/c_/q_/f_ transformation segment."""
    if crop is not None and crop not in VALID_CROPS:
        raise ValueError(f"crop must be one of: {', '.join(sorted(VALID_CROPS))}")

    cloud = cloud_name if cloud_name is not None else current_app.config["CLOUDINARY_CLOUD_NAME"]
    base_url = f"{CLOUDINARY_BASE}/{cloud}/image/upload"

    transforms = []
    if width:
        transforms.append(f"w_{width}")
    if height:
        transforms.append(f"h_{height}")
    if crop:
        transforms.append(f"c_{crop}")
    if quality:
        transforms.append(f"q_{quality}")
    if format:
        transforms.append(f"f_{format}")

    if not transforms:
        return f"{base_url}/{public_id}"
    return f"{base_url}/{','.join(transforms)}/{public_id}"


def preset_url(public_id: str, preset: str, cloud_name: str | None = None) -> str:
    if preset not in CLOUDINARY_PRESETS:
        raise ValueError(f"Unknown image preset: {preset}")
    return cloudinary_url(public_id, cloud_name=cloud_name, **CLOUDINARY_PRESETS[preset])


def upload_config() -> dict:
    """Settings the admin product form needs to upload straight to the CDN."""
    cfg = current_app.config
    cloud = cfg["CLOUDINARY_CLOUD_NAME"]
    return {
        "cloud_name": cloud,
        "upload_preset": cfg["CLOUDINARY_UPLOAD_PRESET"],
        "upload_url": f"https://api.cloudinary.com/v1_1/{cloud}/image/upload",
        "presets": CLOUDINARY_PRESETS,
    }
