"""Built-in English Dictionary served when no other source is usable."""

import copy
from typing import Any, Dict

DEFAULT_DICTIONARY: Dict[str, Any] = {
    "seo": {
        "title": "Orthodontics Clinic",
        "description": "Specialist orthodontic care for children and adults.",
        "keywords": "orthodontics, braces, clear aligners, retainers",
    },
    "navbar": {
        "home": "Home",
        "about": "About",
        "services": "Services",
        "gallery": "Gallery",
        "faq": "FAQ",
        "contact": "Contact",
    },
    "pages": {
        "home": {
            "title": "Welcome to our orthodontics clinic",
            "description": "Straighter smiles with modern, comfortable treatment.",
            "missionTitle": "Our mission",
            "mission": "Personal orthodontic care built around every patient.",
            "contactTitle": "Get in touch",
            "contactInfo": "Call or message us to book a consultation.",
        },
        "about": {
            "title": "About us",
            "mission": "We provide orthodontic treatment for all ages.",
            "services": "What we offer",
            "services_list": [],
            "team": "Our team",
            "team_info": "",
        },
        "services": {
            "title": "Our services",
            "services_list": [],
            "descriptions": [],
        },
        "gallery": {
            "title": "Before & after",
            "cases": [],
        },
        "faq": {
            "title": "Frequently asked questions",
            "questions": [],
        },
        "contact": {
            "title": "Contact",
            "email": "",
            "phone": "",
            "address": "",
            "form": {
                "name": "Name",
                "email": "Email",
                "message": "Message",
                "submit": "Send",
            },
        },
    },
}


def default_dictionary() -> Dict[str, Any]:
    """A fresh copy, safe for callers to mutate."""
    return copy.deepcopy(DEFAULT_DICTIONARY)
