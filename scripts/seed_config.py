"""
Seed config_items and navigation_settings with the default dashboard setup.

Safe to re-run: labels and navigation keys that already exist are skipped.

Usage:
    python scripts/seed_config.py
"""

import os
import sys
from pathlib import Path

# Add backend to path so we can import modules
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from dotenv import load_dotenv
load_dotenv(os.path.join(backend_dir, ".env"))

import structlog

from models.navigation import NavigationItemCreate
from models.taxonomy import ConfigCategory
from utils.text_utils import normalize_label

logger = structlog.get_logger(__name__)

# category → [(label, color)] in display order
DEFAULT_TAXONOMY = {
    ConfigCategory.TEAMS: [
        ("Tacint", "blue"), ("Omicron", "green"), ("Pi", "purple"),
        ("Engineering", "orange"), ("Product", "red"), ("Design", "pink"),
    ],
    ConfigCategory.BUSINESS_IMPACTS: [
        ("Increase Revenue", "green"), ("Increase Retention", "blue"),
        ("Increase CLTV", "purple"), ("Reduce Costs", "orange"),
        ("Improve Efficiency", "yellow"),
    ],
    ConfigCategory.PRODUCT_AREAS: [
        ("Keap", "blue"), ("Marketing Center", "green"), ("Reporting Center", "purple"),
        ("Command Center", "orange"), ("Workforce Center", "red"),
    ],
    ConfigCategory.PROCESS_STAGES: [
        ("Planned", "gray"), ("In Development", "yellow"), ("In Testing", "orange"),
        ("In Production", "blue"), ("Complete", "green"),
    ],
    ConfigCategory.PRIORITIES: [
        ("Low", "green"), ("Medium", "yellow"), ("High", "orange"), ("Critical", "red"),
    ],
    ConfigCategory.STATUSES: [
        ("On Track", "green"), ("At Risk", "yellow"), ("Off Track", "red"),
        ("Complete", "blue"), ("On Hold", "gray"),
    ],
    ConfigCategory.GTM_TYPES: [
        ("Soft Launch", "yellow"), ("Beta Release", "orange"),
        ("Full Launch", "green"), ("Unification", "blue"),
    ],
}

DEFAULT_NAVIGATION = [
    ("dashboard", "Executive Dashboard"),
    ("initiatives", "Master List"),
    ("summary", "Executive Summary"),
    ("calendar", "Calendar View"),
    ("admin", "Admin Settings"),
    ("settings", "User Settings"),
]


def seed_config(taxonomy, navigation) -> dict:
    """
    Insert missing default config items and navigation entries.

    Args:
        taxonomy: TaxonomyService
        navigation: NavigationService

    Returns:
        {"config_items": created count, "navigation": created count}
    """
    created_items = 0
    for category, entries in DEFAULT_TAXONOMY.items():
        existing = {normalize_label(item.label) for item in taxonomy.list_active(category)}
        for label, color in entries:
            if normalize_label(label) in existing:
                continue
            taxonomy.create(category, label, color=color)
            created_items += 1

    existing_keys = {item.item_key for item in navigation.get_all()}
    created_nav = 0
    for item_key, item_label in DEFAULT_NAVIGATION:
        if item_key in existing_keys:
            continue
        navigation.create(NavigationItemCreate(item_key=item_key, item_label=item_label))
        created_nav += 1

    logger.info("config_seeded", config_items=created_items, navigation=created_nav)
    return {"config_items": created_items, "navigation": created_nav}


if __name__ == "__main__":
    from services.taxonomy_service import get_taxonomy_service
    from services.navigation_service import get_navigation_service

    print("Seeding config items and navigation...")
    try:
        counts = seed_config(get_taxonomy_service(), get_navigation_service())
    except Exception as e:
        logger.error("seed_config_failed", error=str(e))
        print(f"✗ Failed to seed config: {e}")
        raise
    print(f"✓ {counts['config_items']} config items, {counts['navigation']} navigation entries")
    print("\nDone!")
