"""StyleSync: capture a writer's style fingerprint and rewrite text toward it."""

import logging
import random
from typing import Callable, Optional

from stylesync.config import DEFAULT_SETTINGS, Settings
from stylesync.profile import RewriteOptions, StyleProfile
from stylesync.prompt import build_style_prompt, sanitize_model_output
from stylesync.rewrite.pipeline import FinalizeResult, finalize, rewrite
from stylesync.rewrite.refine import RefinementResult, verify_and_refine
from stylesync.text.detection import compare_ai_detection, detect_ai_content
from stylesync.text.diagnosis import check_context, verify_style_match
from stylesync.text.fingerprint import SampleStyle, extract_style
from stylesync.text.pov import detect_pov

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

Generator = Callable[[str, str], str]


def paraphrase(
    text: str,
    profile: Optional[StyleProfile] = None,
    generator: Optional[Generator] = None,
    max_passes: int = DEFAULT_SETTINGS.default_max_passes,
    options: Optional[RewriteOptions] = None,
    rng: Optional[random.Random] = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> RefinementResult:
    """Canonical entry point for style-matched paraphrasing.

    This function orchestrates the full pipeline:
    1. Optionally asks ``generator`` for a draft, passing it the style prompt
    2. Sanitizes the generated draft
    3. Falls back to the input text when there is no generator, it fails or
       it returns nothing usable
    4. Finalizes and refines the draft until it measures as human or the
       pass budget runs out

    Args:
        text: Text to paraphrase
        profile: Optional target profile
        generator: Callable taking (system_prompt, text) and returning a draft
        max_passes: Refinement pass budget
        options: Per-call switches
        rng: Random source; seed it for reproducible output
        settings: Thresholds to apply

    Returns:
        RefinementResult with the output text, metrics and actions
    """
    draft = text
    if generator is not None and text and text.strip():
        try:
            generated = sanitize_model_output(generator(build_style_prompt(profile), text))
        except Exception as e:
            logger.warning("Generator failed, rewriting the input directly: %s", e)
        else:
            if generated.strip():
                draft = generated
            else:
                logger.warning("Generator returned no text, rewriting the input directly")

    return verify_and_refine(draft, profile, max_passes, options, rng, settings)


__all__ = [
    "FinalizeResult",
    "RefinementResult",
    "RewriteOptions",
    "SampleStyle",
    "Settings",
    "StyleProfile",
    "build_style_prompt",
    "check_context",
    "compare_ai_detection",
    "detect_ai_content",
    "detect_pov",
    "extract_style",
    "finalize",
    "paraphrase",
    "rewrite",
    "sanitize_model_output",
    "verify_and_refine",
    "verify_style_match",
]
