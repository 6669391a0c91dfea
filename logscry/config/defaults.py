from __future__ import annotations

import copy
import logging

log = logging.getLogger(__name__)

FALLBACK_CATEGORY = "Engine"

# Bracket tags and phrases owned by the system buckets (priority 6).  The
# dialogue rule excludes all of them so a tagged line containing ": " is never
# mistaken for speech.
GRAPHICS_MARKERS: list[str] = [
    "[SHADER]", "[TEXTURE]", "[RENDER]", "[VULKAN]", "[SCENE]",
    "Shader uses incorrect vertex layout", "Signature:",
    "Metadata/", ".fxgraph", "EngineGraphs", "[MESH]", "[MAT]",
    "[TRAILS]", "[GRAPH]", "[VIDEO]", "[PARTICLE]", "[STREAMLINE]",
]

ENGINE_MARKERS: list[str] = [
    "[ENTITY]", "[ENGINE]", "[JOB]", "[STORAGE]", "[BUNDLE]",
    "[WINDOW]", "Client-Safe Instance ID", "Generating level",
    "[RESOURCE]",
]

AUDIO_MARKERS: list[str] = ["[SOUND]", "[AUDIO]"]

NETWORK_MARKERS: list[str] = [
    "[HTTP2]", "User agent:", "Using backend:", "Send patching protocol",
    "Web root:", "Backup Web root:", "Requesting root contents",
    "Queue file to download", "Got file list", "Requesting folder",
    ".datc64.bundle.bin", "Connecting to", "Connected to",
    "Got Instance Details", "Connect time to instance",
    "patch-poe", "poecdn.com", "Async connecting to",
    "pathofexile2.com", "login.pathofexile2.com",
]

SEVERITY_MARKERS: list[str] = ["[WARN", "[CRIT", "[ERROR"]

DIALOGUE_EXCLUDED: list[str] = [
    "[SHADER]", "[TEXTURE]", "[RENDER]", "[VULKAN]", "[SCENE]",
    "[ENTITY]", "[ENGINE]", "[JOB]", "[STORAGE]", "[BUNDLE]",
    "[WINDOW]", "[SOUND]", "[AUDIO]", "[Item Filter]", "[HTTP2]",
    "[MESH]", "[MAT]", "[TRAILS]", "[GRAPH]", "[VIDEO]",
    "[PARTICLE]", "[RESOURCE]", "[STREAMLINE]", "@From ",
    "User agent:", "Using backend:", "Web root:", "Queue :",
    "family =", "Driver Version:", "Windows Version:", "OS:",
    "Enabled:", "Result:", "Hash:", "count =", "flags =",
    "#", "&: GUILD UPDATE:", "Trade accepted", "Trade cancelled",
    "Failed to apply item", *SEVERITY_MARKERS,
]

DEFAULT_RULES: list[dict] = [
    {"name": "Warnings", "priority": 1, "any_of": SEVERITY_MARKERS},
    {"name": "Trade", "priority": 2, "validator": "chat"},
    {"name": "Death", "priority": 3, "required": ["has been slain"]},
    {"name": "Level Up", "priority": 3, "required": ["is now level"]},
    {
        "name": "Skill",
        "priority": 3,
        "any_of": ["have received", "Successfully allocated passive skill"],
    },
    {
        "name": "Gameplay",
        "priority": 4,
        "any_of": [
            "Failed to apply item:",
            "Item has no space for more Mods",
            "Cannot use that item",
            "You cannot",
            "Not enough",
        ],
    },
    {
        "name": "Guild",
        "priority": 5,
        "any_of": ["Joined guild", "guild named", "&: GUILD UPDATE:", "GUILD UPDATE"],
    },
    {"name": "Item Filter", "priority": 6, "required": ["[Item Filter]"]},
    {"name": "Graphics", "priority": 6, "any_of": GRAPHICS_MARKERS},
    {"name": "Engine", "priority": 6, "any_of": ENGINE_MARKERS},
    {"name": "Audio", "priority": 6, "any_of": AUDIO_MARKERS},
    {"name": "Network", "priority": 6, "any_of": NETWORK_MARKERS},
    {
        "name": "Dialogue",
        "priority": 7,
        "required": [": "],
        "exclude": DIALOGUE_EXCLUDED,
        "validator": "npc_dialogue",
    },
]

DEFAULT_DIALOGUE: dict = {
    "max_speaker_length": 100,
    "min_speech_length": 3,
    "forbidden_speaker_prefixes": [
        "Has", "Is", "Been", "Now", "Level", "Client", "Server",
        "INFO", "DEBUG", "WARN", "ERROR", "CRIT",
        "Using", "User", "Web", "Queue", "Hash", "Driver",
        "Windows", "OS", "Enabled", "Result", "Connecting",
        "Connected", "Got", "Send", "Requesting", "Backup",
    ],
    "forbidden_speaker_substrings": [
        "Client", "Server", "INFO", "DEBUG", "WARN", "ERROR", "CRIT",
        "=", "[", "]", "{", "}", "<", ">", "//", "\\", ".exe", ".dll",
        "Version", "Build", "family", "count", "flags", "poecdn",
        "pathofexile", "http", "://", "0x",
    ],
    "forbidden_speech_substrings": [
        "=", "ON", "OFF", "true", "false", "null", "NULL",
        "Version", "Build", "family", "count", "flags",
        "accepted", "cancelled", "Failed to apply",
        "INFO", "DEBUG", "WARN", "ERROR", "CRIT",
        "Client", "Server", ".dll", ".exe", "0x",
        "://", "poecdn", "pathofexile",
    ],
}


def get_default_rules() -> list[dict]:
    """Return a private copy of the built-in rule table."""
    return copy.deepcopy(DEFAULT_RULES)


def get_filter_presets(cfg: dict | None = None) -> dict[str, list[str]]:
    """Return ``{preset: [category, ...]}`` from *cfg* or the defaults."""
    source = (cfg or DEFAULT_CONFIG).get("filters", {})
    presets = source.get("presets", {})
    result: dict[str, list[str]] = {}
    for name, categories in presets.items():
        if not isinstance(categories, list):
            log.warning("Ignoring filter preset %r: expected a list", name)
            continue
        result[name] = [str(c) for c in categories]
    return result


DEFAULT_CONFIG: dict = {
    "general": {
        "log_file": "~/.local/share/logscry/logscry.log",
        "log_level": "INFO",
        "max_events": 20000,
    },
    "watch": {
        "poll_interval_ms": 200,
        "remember_last_file": True,
        "auto_start": True,
        "last_file": "",
    },
    "categories": {
        "fallback": FALLBACK_CATEGORY,
        "rules": DEFAULT_RULES,
    },
    "dialogue": DEFAULT_DIALOGUE,
    "filters": {
        "presets": {
            "player": ["Death", "Level Up", "Skill", "Trade"],
            "gameplay": [
                "Death", "Level Up", "Skill", "Dialogue", "Guild",
                "Item Filter", "Trade", "Gameplay",
            ],
            "system": ["Network", "Graphics", "Engine", "Audio"],
            "diagnostics": ["Warnings"],
        },
    },
    "keybindings": {
        "open_file": "o",
        "toggle_watch": "s",
        "clear_view": "c",
        "focus_search": "f",
        "quit": "q",
    },
}
