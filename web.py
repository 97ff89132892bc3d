"""Web interface for the StyleSync paraphraser."""

import random
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from stylesync import __version__, paraphrase
from stylesync.profile import RewriteOptions, StyleProfile
from stylesync.text.detection import compare_ai_detection
from stylesync.text.diagnosis import check_context, verify_style_match
from stylesync.text.fingerprint import extract_style

MAX_TEXT_LENGTH = 8000

app = FastAPI(
    title="StyleSync",
    description="Rewrite text to match a writer's own style",
    version=__version__,
)


class ProfileModel(BaseModel):
    """Target profile sent with a paraphrase request."""

    name: str = "Default"
    formality: float = Field(0.5, ge=0.0, le=1.0)
    pacing: float = Field(0.5, ge=0.0, le=1.0)
    descriptiveness: float = Field(0.5, ge=0.0, le=1.0)
    directness: float = Field(0.5, ge=0.0, le=1.0)
    tone: str = "neutral"
    custom_lexicon: List[str] = Field(default_factory=list)
    samples: List[str] = Field(default_factory=list)


class ParaphraseRequest(BaseModel):
    """Request model for paraphrasing."""

    text: str = Field(..., min_length=1, max_length=MAX_TEXT_LENGTH)
    profile: Optional[ProfileModel] = None
    seed: Optional[int] = None
    max_passes: int = Field(2, ge=0, le=5)
    include_lexicon_notes: bool = False


class ParaphraseResponse(BaseModel):
    """Response model for paraphrased text."""

    original: str
    result: str
    metrics: Dict[str, Any]
    style_match: Dict[str, Any]
    ai_detection: Dict[str, Any]
    context: Dict[str, Any]


class StyleRequest(BaseModel):
    """Writing samples to fingerprint."""

    samples: List[str] = Field(..., min_length=1)


@app.get("/", response_class=HTMLResponse)
async def root():
    """Serve the main web interface."""
    return """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>StyleSync</title>
    <style>
        body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; max-width: 760px; margin: 40px auto; padding: 0 20px; color: #333; }
        textarea { width: 100%; min-height: 160px; padding: 12px; border: 2px solid #e0e0e0; border-radius: 8px; font: inherit; }
        label { display: block; font-weight: 600; margin: 16px 0 6px; }
        button { margin-top: 16px; padding: 12px 24px; border: none; border-radius: 8px; background: #667eea; color: white; font-weight: 600; cursor: pointer; }
        .error { color: #c33; margin-top: 12px; }
    </style>
</head>
<body>
    <h1>StyleSync</h1>
    <p>Paste a sample of your writing, then the text you want rewritten in your voice.</p>
    <label for="sample-text">Your writing sample (optional):</label>
    <textarea id="sample-text"></textarea>
    <label for="input-text">Text to rewrite:</label>
    <textarea id="input-text" maxlength="8000"></textarea>
    <button id="rewrite-btn">Rewrite</button>
    <div class="error" id="error-message"></div>
    <label for="output-text">Result:</label>
    <textarea id="output-text" readonly></textarea>
    <script>
        document.getElementById('rewrite-btn').addEventListener('click', async () => {
            const text = document.getElementById('input-text').value.trim();
            const sample = document.getElementById('sample-text').value.trim();
            const errorMsg = document.getElementById('error-message');
            errorMsg.textContent = '';
            if (!text) {
                errorMsg.textContent = 'Please enter some text to rewrite.';
                return;
            }
            const body = { text };
            if (sample) {
                body.profile = { samples: [sample] };
            }
            const response = await fetch('/api/paraphrase', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(body),
            });
            const data = await response.json();
            if (!response.ok) {
                errorMsg.textContent = typeof data.detail === 'string' ? data.detail : 'Invalid request';
                return;
            }
            document.getElementById('output-text').value = data.result;
        });
    </script>
</body>
</html>
"""


@app.post("/api/paraphrase", response_model=ParaphraseResponse)
async def paraphrase_text(request: ParaphraseRequest):
    """Rewrite the provided text toward an optional profile."""
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Text cannot be empty")

    profile = None
    if request.profile is not None:
        try:
            profile = StyleProfile(**request.profile.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    rng = random.Random(request.seed) if request.seed is not None else None
    try:
        result = paraphrase(
            request.text,
            profile,
            max_passes=request.max_passes,
            options=RewriteOptions(include_lexicon_notes=request.include_lexicon_notes),
            rng=rng,
        )
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error processing text: {str(e)}")

    return ParaphraseResponse(
        original=request.text,
        result=result.output,
        metrics=result.metrics.to_dict(),
        style_match=verify_style_match(result.output, profile).to_dict(),
        ai_detection=compare_ai_detection(request.text, result.output).to_dict(),
        context=check_context(request.text, result.output).to_dict(),
    )


@app.post("/api/style")
async def analyze_style(request: StyleRequest):
    """Return the fingerprint of the provided writing samples."""
    if not any(sample.strip() for sample in request.samples):
        raise HTTPException(status_code=400, detail="Samples cannot be empty")
    return extract_style(request.samples).to_dict()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
