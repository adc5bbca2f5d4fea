# src/gateway/catalog.py — v1
"""Known model keys and their remote model ids on the inference API.

Keys are the short names used by callers (e.g. "flux-schnell"). Unknown keys
are passed to the endpoint verbatim, so a full "org/model" id also works.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from infergate.gateway.models import ModelCategory


@dataclass(frozen=True)
class ModelSpec:
    """Catalog entry for one model key."""

    key: str
    model_id: str
    category: ModelCategory
    description: str = ""
    task: str = ""


def _spec(
    key: str, model_id: str, category: ModelCategory, description: str = "", task: str = "",
) -> ModelSpec:
    return ModelSpec(
        key=key, model_id=model_id, category=category, description=description, task=task,
    )


_I, _T, _A, _V, _M = (
    ModelCategory.IMAGE,
    ModelCategory.TEXT,
    ModelCategory.AUDIO,
    ModelCategory.VISION,
    ModelCategory.MULTIMODAL,
)

STT = "speech-to-text"
TTS = "text-to-speech"

MODEL_CATALOG: Mapping[str, ModelSpec] = MappingProxyType({
    s.key: s
    for s in (
        # Image generation
        _spec("flux-schnell", "black-forest-labs/FLUX.1-schnell", _I, "Fast 4-step generation"),
        _spec("sdxl", "stabilityai/stable-diffusion-xl-base-1.0", _I, "Stable Diffusion XL"),
        _spec("sd-3.5-turbo", "stabilityai/stable-diffusion-3.5-large-turbo", _I),
        # Text generation
        _spec("phi", "microsoft/Phi-3-mini-4k-instruct", _T, "Compact instruction model"),
        _spec("gemma", "google/gemma-2-2b-it", _T, "Google lightweight model"),
        _spec("mistral", "mistralai/Mistral-7B-Instruct-v0.3", _T),
        _spec("qwen-small", "Qwen/Qwen2.5-1.5B-Instruct", _T),
        _spec("llama-small", "meta-llama/Llama-3.2-1B-Instruct", _T),
        _spec("qwen-coder", "Qwen/Qwen2.5-Coder-1.5B-Instruct", _T, "Code model"),
        _spec("starcoder", "bigcode/starcoder2-3b", _T, "Code model"),
        # Speech-to-text / text-to-speech
        _spec("whisper-large", "openai/whisper-large-v3", _A, "Multilingual STT", task=STT),
        _spec("whisper-turbo", "openai/whisper-large-v3-turbo", _A, "Fast STT", task=STT),
        _spec("mms-tts", "facebook/mms-tts-eng", _A, "English TTS", task=TTS),
        _spec("parler-tts", "parler-tts/parler-tts-mini-v1", _A, "Expressive TTS", task=TTS),
        _spec("melo-tts", "myshell-ai/MeloTTS-English", _A, task=TTS),
        # Vision
        _spec("vit-large", "google/vit-large-patch16-224", _V, "Image classification"),
        _spec("resnet-50", "microsoft/resnet-50", _V, "Image classification"),
        _spec("detr", "facebook/detr-resnet-50", _V, "Object detection"),
        _spec("yolos", "hustvl/yolos-small", _V, "Object detection"),
        _spec("dpt-large", "Intel/dpt-large", _V, "Depth estimation"),
        _spec("segformer", "nvidia/segformer-b5-finetuned-ade-640-640", _V, "Segmentation"),
        # Multimodal
        _spec("blip", "Salesforce/blip-image-captioning-large", _M, "Captioning"),
        _spec("git", "microsoft/git-large-coco", _M, "Captioning"),
        _spec("vilt", "dandelin/vilt-b32-finetuned-vqa", _M, "Visual QA"),
        _spec("blip-vqa", "Salesforce/blip-vqa-base", _M, "Visual QA"),
        _spec("donut", "naver-clova-ix/donut-base-finetuned-docvqa", _M, "Document QA"),
    )
})

FALLBACK_ORDER: Mapping[ModelCategory, tuple[str, ...]] = MappingProxyType({
    ModelCategory.IMAGE: ("flux-schnell", "sdxl", "sd-3.5-turbo"),
    ModelCategory.TEXT: ("phi", "gemma", "llama-small", "mistral"),
})

# Used instead of the category order when the preferred key belongs to the task;
# audio mixes STT and TTS models, which take different inputs.
TASK_FALLBACK_ORDER: Mapping[str, tuple[str, ...]] = MappingProxyType({
    TTS: ("mms-tts", "melo-tts"),
})


def get_model_spec(model_key: str) -> ModelSpec | None:
    return MODEL_CATALOG.get(model_key)


def resolve_model_id(model_key: str) -> str:
    """Remote model id for a key; unknown keys are used as-is."""
    spec = MODEL_CATALOG.get(model_key)
    return spec.model_id if spec else model_key


def fallback_chain(preferred: str, category: ModelCategory | str | None) -> list[str]:
    """Preferred key first, then its task or category fallback order without duplicates."""
    spec = MODEL_CATALOG.get(preferred)
    if spec is not None and spec.task in TASK_FALLBACK_ORDER:
        order = TASK_FALLBACK_ORDER[spec.task]
    else:
        parsed = ModelCategory.parse(category)
        order = FALLBACK_ORDER.get(parsed, ()) if parsed else ()
    return [preferred, *(k for k in order if k != preferred)]
