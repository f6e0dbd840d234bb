"""
Default site settings, used to seed an empty table and by the reset action.
"""

from __future__ import annotations

DEFAULT_SITE_SETTINGS: list[dict] = [
    {"key": "site_title", "value": "Portfolio - Web Developers", "category": "general", "description": "Main site title"},
    {"key": "site_description", "value": "Professional web development services", "category": "general", "description": "Site meta description"},
    {"key": "hero_title", "value": "Hi, we build for the web", "category": "content", "description": "Hero section main title"},
    {"key": "hero_subtitle", "value": "Crafting exceptional digital experiences with modern technology and thoughtful design.", "category": "content", "description": "Hero section subtitle"},
    {"key": "contact_email", "value": "hello@example.com", "category": "contact", "description": "Primary contact email"},
    {"key": "contact_phone", "value": "", "category": "contact", "description": "Primary contact phone"},
    {"key": "contact_address", "value": "Available Worldwide", "category": "contact", "description": "Business address or location"},
    {"key": "logo_url", "value": "/logo.png", "category": "branding", "description": "Site logo URL"},
    {"key": "theme_primary_color", "value": "#3B82F6", "category": "theme", "description": "Primary brand color"},
    {"key": "theme_secondary_color", "value": "#8B5CF6", "category": "theme", "description": "Secondary brand color"},
    {"key": "default_theme", "value": "dark", "category": "theme", "description": "Default theme preference"},
    {"key": "github_link", "value": "", "category": "social", "description": "GitHub profile URL"},
    {"key": "linkedin_link", "value": "", "category": "social", "description": "LinkedIn profile URL"},
    {"key": "facebook_link", "value": "", "category": "social", "description": "Facebook page URL"},
    {"key": "instagram_link", "value": "", "category": "social", "description": "Instagram profile URL"},
    {"key": "twitter_link", "value": "", "category": "social", "description": "Twitter profile URL"},
    {"key": "youtube_link", "value": "", "category": "social", "description": "YouTube channel URL"},
    {"key": "tagline", "value": "We Build Digital Experiences", "category": "branding", "description": "Site tagline or slogan"},
    {"key": "about_text", "value": "Developers creating modern, scalable web solutions", "category": "content", "description": "About section text"},
    {"key": "footer_text", "value": "Built with care", "category": "content", "description": "Footer copyright text"},
]


def default_settings() -> list[dict]:
    """Return a fresh copy so callers can mutate it safely."""
    return [dict(item) for item in DEFAULT_SITE_SETTINGS]
