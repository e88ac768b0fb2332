"""Shared champion catalog and pools for the engine tests."""
import pytest

from draftflow.models.champion import build_champion_lookup

CHAMPIONS = [
    # Top
    {"name": "Camille", "roles": ["Top"], "damage_type": "AD",
     "tags": ["SideLaneThreat", "DiveThreat", "PickThreat"]},
    {"name": "Renekton", "roles": ["Top"], "damage_type": "AD",
     "tags": ["DiveThreat", "Frontline", "EarlyPriority"]},
    {"name": "Ornn", "roles": ["Top"], "damage_type": "AP",
     "tags": ["HardEngage", "Frontline"]},
    # Jungle
    {"name": "Sejuani", "roles": ["Jungle"], "damage_type": "AP",
     "tags": ["HardEngage", "Frontline"]},
    {"name": "Viego", "roles": ["Jungle"], "damage_type": "AD",
     "tags": ["DiveThreat", "SustainedDPS"]},
    {"name": "Lee Sin", "roles": ["Jungle"], "damage_type": "AD",
     "tags": ["PickThreat", "DiveThreat"]},
    # Mid (Sylas flexes Top)
    {"name": "Orianna", "roles": ["Mid"], "damage_type": "AP",
     "tags": ["Waveclear", "ZoneControl", "PrimaryCarry"]},
    {"name": "Syndra", "roles": ["Mid"], "damage_type": "AP",
     "tags": ["Waveclear", "PickThreat", "Poke"]},
    {"name": "Sylas", "roles": ["Mid", "Top"], "damage_type": "AP",
     "tags": ["DiveThreat", "Waveclear"]},
    # ADC
    {"name": "Jinx", "roles": ["ADC"], "damage_type": "AD",
     "tags": ["PrimaryCarry", "Waveclear", "SustainedDPS"]},
    {"name": "Varus", "roles": ["ADC"], "damage_type": "AD",
     "tags": ["Poke", "Waveclear", "PrimaryCarry"]},
    {"name": "Kai'Sa", "roles": ["ADC"], "damage_type": "Mixed",
     "tags": ["PrimaryCarry", "DiveThreat", "AntiTank"]},
    # Support
    {"name": "Nautilus", "roles": ["Support"], "damage_type": "AP",
     "tags": ["HardEngage", "Frontline"]},
    {"name": "Janna", "roles": ["Support"], "damage_type": "AP",
     "tags": ["Disengage"]},
    {"name": "Rakan", "roles": ["Support"], "damage_type": "AP",
     "tags": ["HardEngage", "FollowUpEngage"]},
]

TEAM_POOLS = {
    "T1": {
        "Top": ["Camille", "Renekton", "Ornn", "Sylas"],
        "Jungle": ["Sejuani", "Viego", "Lee Sin"],
        "Mid": ["Orianna", "Syndra", "Sylas"],
        "ADC": ["Jinx", "Varus", "Kai'Sa"],
        "Support": ["Nautilus", "Janna", "Rakan"],
    },
}

# Every check required except Disengage/AntiTank, as in the default config
DEFAULT_TOGGLES = {
    "HasHardEngage": True,
    "HasFrontline": True,
    "HasWaveclear": True,
    "HasDisengage": False,
    "HasAntiTank": False,
    "HasPrimaryCarry": True,
    "DamageMix": True,
    "TopMustBeThreat": True,
}

NOTHING_REQUIRED = {name: False for name in DEFAULT_TOGGLES}


@pytest.fixture
def champion_lookup():
    return build_champion_lookup(CHAMPIONS)


@pytest.fixture
def team_pools():
    return {team: {role: list(names) for role, names in pools.items()} for team, pools in TEAM_POOLS.items()}


@pytest.fixture
def anyio_backend():
    return "asyncio"
