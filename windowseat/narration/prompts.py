# windowseat/narration/prompts.py
"""
Prompt construction for checkpoint narrations, and the fixed sentences used
when no narration can be generated.
"""
from dataclasses import dataclass
from typing import Optional

from ..config import NarrationPreferences
from ..constants import FlightConstants
from ..route.data_models import Checkpoint, CheckpointKind

LANGUAGE_NAMES = {
    'en': 'English',
    'es': 'Spanish',
    'fr': 'French',
    'de': 'German',
    'it': 'Italian',
    'pt': 'Portuguese',
    'ja': 'Japanese',
    'zh': 'Chinese (Simplified)',
    'ko': 'Korean',
}

FOCUS_INSTRUCTIONS = {
    'geological': 'Focus primarily on geological features, rock formations, and natural landscape evolution.',
    'historical': 'Focus primarily on historical events, ancient sites, and human history of the region.',
    'cultural': 'Focus primarily on cultural landmarks, modern cities, and contemporary human activity.',
    'mixed': 'Include a balanced mix of geological, historical, and cultural information.',
}

LENGTH_INSTRUCTIONS = {
    'short': 'Write 1-2 sentences that take about 10 seconds to read aloud.',
    'medium': 'Write 2-3 sentences that take about 20 seconds to read aloud.',
    'long': 'Write 3-4 sentences that take about 30 seconds to read aloud.',
}

FALLBACK_NARRATIONS = {
    CheckpointKind.DEPARTURE: ("We've just departed and are climbing to cruise altitude. "
                               "Below you can see the landscape transitioning as we gain height."),
    CheckpointKind.ARRIVAL: ("We're beginning our descent towards our destination. "
                             "You may notice the landscape becoming more detailed as we descend."),
    CheckpointKind.WAYPOINT: ("We're cruising at altitude. The landscape below tells a story of "
                              "geological and human history spanning millions of years."),
}


@dataclass
class FlightContext:
    """Per-flight facts woven into every narration prompt."""
    flight_info: Optional[str] = None  # e.g. "British Airways flight BA115"
    origin: Optional[str] = None
    destination: Optional[str] = None
    total_checkpoints: Optional[int] = None


def fallback_narration(checkpoint: Checkpoint) -> str:
    return FALLBACK_NARRATIONS.get(checkpoint.kind, FALLBACK_NARRATIONS[CheckpointKind.WAYPOINT])


def build_route_context(context: FlightContext, checkpoint_index: Optional[int] = None) -> str:
    parts = []
    if context.origin and context.destination:
        parts.append(f"Route: {context.origin} → {context.destination}")
    elif context.origin:
        parts.append(f"Departed from: {context.origin}")
    elif context.destination:
        parts.append(f"Heading to: {context.destination}")

    if checkpoint_index is not None and context.total_checkpoints:
        progress = int(round(checkpoint_index / context.total_checkpoints * 100))
        parts.append(f"Journey progress: {progress}% "
                     f"(checkpoint {checkpoint_index + 1} of {context.total_checkpoints})")
    return "\n".join(parts)


def build_landmark_context(checkpoint: Optional[Checkpoint]) -> str:
    if checkpoint is None:
        return ''

    landmark = checkpoint.landmark
    if landmark is None:
        return f"Landmark: {checkpoint.name}" if checkpoint.name else ''

    parts = [f"Location: {checkpoint.name}"]
    if landmark.type:
        parts.append(f"Type: {landmark.type.replace('_', ' ')}")
    region = [p for p in (landmark.region, landmark.country) if p]
    if region:
        parts.append(f"Region: {', '.join(region)}")
    nearby = [f.name for f in landmark.nearby_features if f.name and f.name != 'Unknown']
    if nearby:
        parts.append(f"Nearby: {', '.join(nearby)}")
    return "\n".join(parts)


def build_narration_prompt(checkpoint: Checkpoint, context: FlightContext,
                           preferences: Optional[NarrationPreferences] = None) -> str:
    preferences = preferences or NarrationPreferences()

    altitude_context = ''
    if checkpoint.altitude:
        altitude_ft = int(round(checkpoint.altitude * FlightConstants.METERS_TO_FEET))
        altitude_context = f"The observer is at approximately {altitude_ft:,} feet altitude."

    focus = FOCUS_INSTRUCTIONS.get(preferences.content_focus, FOCUS_INSTRUCTIONS['mixed'])
    length = LENGTH_INSTRUCTIONS.get(preferences.length, LENGTH_INSTRUCTIONS['medium'])

    language = preferences.language or 'en'
    language_name = LANGUAGE_NAMES.get(language, 'English')
    language_instruction = ''
    if language != 'en':
        language_instruction = (f"IMPORTANT: Write the narration in {language_name}. "
                                f"The entire response must be in {language_name}.")

    header = [
        'You are an expert Aerial Historian and Geographer narrating for the "Window Seat" flight companion app.',
        '',
        f"Location: {checkpoint.latitude:.4f}°, {checkpoint.longitude:.4f}°",
        altitude_context,
        f"Flight: {context.flight_info}" if context.flight_info else '',
        build_route_context(context, checkpoint.index),
        build_landmark_context(checkpoint),
    ]

    body = f"""
Your task: Describe what's visible within a 50-mile radius in the direction of travel. Weave together 3 layers of interest:
1. **Geological:** The deep story - how the land formed, ancient forces that shaped it
2. **Historical:** Human history - battles fought, civilizations that rose, events that echoed
3. **Modern:** What's there now - cities, industry, how people use this land today

Tone & Style:
- Wonder-filled, conversational, vivid
- Write like a letter to a curious traveler, not a textbook
- {focus}
- {length}
- Be specific about what's visible (rivers, mountains, cities, coastlines)
- If over ocean: maritime features, shipping routes, underwater geography
- Weave journey context naturally (where we came from, where we're headed)

Rules:
- NEVER say "as an AI" or use listicle formatting
- Don't mention coordinates - describe the place
- No hedging ("might be", "possibly") - speak with confident knowledge
{language_instruction}

Respond with ONLY the narration text."""

    return "\n".join(header) + "\n" + body
