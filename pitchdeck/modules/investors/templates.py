"""Fixed investor personas offered as starting points for new profiles."""

from typing import Any

INVESTOR_TEMPLATES: list[dict[str, Any]] = [
    {
        "id": "vc-seed-stage",
        "name": "Seed Stage VC",
        "type": "vc",
        "description": "Early-stage venture capitalists focused on seed rounds",
        "investment_criteria": {
            "preferredStages": ["seed", "series-a"],
            "preferredSectors": ["SaaS", "Fintech", "Healthtech"],
            "minInvestment": 500_000,
            "maxInvestment": 5_000_000,
        },
        "communication_preferences": {
            "preferredFormat": "pitch_deck",
            "preferredLength": "standard",
            "keyFocusAreas": ["traction", "team", "market_size", "unit_economics"],
        },
    },
    {
        "id": "angel-investor",
        "name": "Angel Investor",
        "type": "angel",
        "description": "Individual angel investors with diverse interests",
        "investment_criteria": {
            "preferredStages": ["idea", "pre-seed", "seed"],
            "preferredSectors": ["All"],
            "minInvestment": 25_000,
            "maxInvestment": 500_000,
        },
        "communication_preferences": {
            "preferredFormat": "pitch_deck",
            "preferredLength": "brief",
            "keyFocusAreas": ["problem", "solution", "team", "traction"],
        },
    },
    {
        "id": "accelerator-program",
        "name": "Accelerator Program",
        "type": "accelerator",
        "description": "Startup accelerators and incubators",
        "investment_criteria": {
            "preferredStages": ["idea", "pre-seed"],
            "preferredSectors": ["All"],
            "minInvestment": 50_000,
            "maxInvestment": 150_000,
        },
        "communication_preferences": {
            "preferredFormat": "pitch_deck",
            "preferredLength": "standard",
            "keyFocusAreas": ["problem", "solution", "market", "team"],
        },
    },
    {
        "id": "corporate-vc",
        "name": "Corporate VC",
        "type": "corporate",
        "description": "Corporate venture capital arms",
        "investment_criteria": {
            "preferredStages": ["seed", "series-a", "series-b"],
            "preferredSectors": ["Enterprise", "B2B", "Deep Tech"],
            "minInvestment": 1_000_000,
            "maxInvestment": 10_000_000,
        },
        "communication_preferences": {
            "preferredFormat": "pitch_deck",
            "preferredLength": "detailed",
            "keyFocusAreas": [
                "technology",
                "market_fit",
                "scalability",
                "partnership_potential",
            ],
        },
    },
]
