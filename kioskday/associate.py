"""
Image association (day labels -> images).

Primary pass:
    each label takes the nearest image strictly after it in document order.
    Two labels may end up with the same image; that is left as is.

Fallback pass (exactly 7 images and some weekdays still missing):
    missing weekdays in Monday..Sunday order are paired with the images not
    used so far, in document order.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from datetime import date
from typing import List, Optional, Sequence

from kioskday.day_labels import scan_day_labels
from kioskday.document import linearize_html
from kioskday.model import WEEKDAYS, DayImageMap, DayLabelMatch, DocumentNode

logger = logging.getLogger(__name__)

# The fallback only runs when the document has one image per weekday
FALLBACK_IMAGE_COUNT = len(WEEKDAYS)


def _nearest_following(images: Sequence[DocumentNode], index: int) -> Optional[DocumentNode]:
    """
    Return the image with the smallest index greater than index.

    images must be sorted by index.
    """
    positions = [img.index for img in images]
    pos = bisect_right(positions, index)
    if pos < len(images):
        return images[pos]
    return None


def associate_images(nodes: Sequence[DocumentNode], labels: Sequence[DayLabelMatch]) -> DayImageMap:
    """
    Map each labelled weekday to its image.

    Weekdays without a valid image are simply absent from the result.
    """
    images: List[DocumentNode] = sorted((n for n in nodes if n.is_image), key=lambda n: n.index)
    result: DayImageMap = {}

    for label in labels:
        img = _nearest_following(images, label.index)
        if img is None:
            continue
        src = img.image_source or ""
        if src and label.weekday not in result:
            result[label.weekday] = src
            logger.debug(
                "Mapped %s to image at distance %d", label.weekday, img.index - label.index
            )

    if len(images) == FALLBACK_IMAGE_COUNT and len(result) < len(WEEKDAYS):
        logger.debug("Using fallback: assigning images in order to days")
        missing = [day for day in WEEKDAYS if day not in result]
        used = set(result.values())
        unused = [img for img in images if (img.image_source or "") not in used]

        for day, img in zip(missing, unused):
            src = img.image_source or ""
            if src:
                result[day] = src
                logger.debug("Fallback: assigned %s to image at node %d", day, img.index)

    return result


def extract_day_images(html: str) -> DayImageMap:
    """
    Full image pipeline: exported HTML -> weekday/image mapping.
    """
    nodes = linearize_html(html)
    labels = scan_day_labels(nodes)
    mapping = associate_images(nodes, labels)
    logger.info(
        "Mapped %d days (%d labels, %d images)",
        len(mapping),
        len(labels),
        sum(1 for n in nodes if n.is_image),
    )
    return mapping


def image_for_day(mapping: DayImageMap, when: date) -> Optional[str]:
    """
    Return the image for the weekday of when (a date or datetime), if any.
    """
    return mapping.get(WEEKDAYS[when.weekday()])
