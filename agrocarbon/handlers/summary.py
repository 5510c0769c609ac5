"""
Plain-text verification report.
"""

from agrocarbon.models.verification import VerificationResult


def format_change(change: float) -> str:
    return f"+{change}" if change > 0 else f"{change}"


def summarize(result: VerificationResult) -> str:
    """
    Render a human-readable report of a verification result.

    Pure formatting: the same result always yields the same text.
    """
    ndvi = result.ndvi_data
    area = result.land_area_verification
    vegetation = result.vegetation_analysis
    status = "VERIFIED" if result.is_verified else "PENDING REVIEW"

    lines = [
        "Satellite Verification Summary",
        "=" * 30,
        "",
        f"Verification Status: {status}",
        f"Confidence Score: {result.confidence}%",
        f"Source: {result.source.value}",
        "",
        "Vegetation Health:",
        f"  - NDVI Value: {ndvi.value} ({format_change(ndvi.change)})",
        f"  - Health Score: {ndvi.health_score}/100",
        f"  - Status: {vegetation.health_status.value}",
        f"  - Crop Type: {vegetation.crop_type}",
        "",
        "Land Area:",
        f"  - Reported: {area.reported_area} acres",
        f"  - Satellite Detected: {area.satellite_detected_area} acres",
        f"  - Accuracy: {area.accuracy}%",
        "",
        "Carbon Sequestration:",
        f"  - Estimated Rate: {vegetation.sequestration_rate} tCO2/year",
        f"  - Imagery: {result.source.value} at {result.image_resolution}m resolution",
        f"  - Cloud Coverage: {result.cloud_coverage}%",
    ]

    if result.fallbacks:
        lines += ["", f"Defaulted inputs: {', '.join(result.fallbacks)}"]

    lines += ["", f"Verified on: {result.verification_date.strftime('%Y-%m-%d')}"]
    return "\n".join(lines)
