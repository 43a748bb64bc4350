# backend/flows.py
"""
AI flows: named request/response contracts around a single Gemini call.

Each Flow validates its input, renders its prompt template, makes one
request and validates the reply against its output model. Any missing or
malformed reply surfaces as FlowError with a generic, user-facing message.
A flow may also declare Tools: deterministic helpers with their own
input/output contracts whose results are merged into the prompt.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Literal, Optional, Sequence, Type

import httpx
from google.genai import errors as genai_errors
from pydantic import BaseModel, Field, TypeAdapter

from . import genai, prompts
from .schemas import PackageDimensions, ShippingRate

log = logging.getLogger(__name__)


class FlowError(Exception):
    pass


@dataclass
class Tool:
    name: str
    description: str
    input_model: Type[BaseModel]
    output_type: Any
    fn: Callable[[Any], Any]

    def __call__(self, payload):
        inp = self.input_model.model_validate(payload)
        return TypeAdapter(self.output_type).validate_python(self.fn(inp))


def _structured(flow: "Flow", inp: BaseModel):
    return genai.generate_structured(flow.render(inp), flow.output_model)


@dataclass
class Flow:
    name: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    prompt: str
    error_message: str
    tools: Sequence[Tool] = field(default_factory=tuple)
    handler: Callable[["Flow", BaseModel], BaseModel] = _structured

    def render(self, inp: BaseModel, **extra) -> str:
        return self.prompt.format(**inp.model_dump(), **extra)

    def tool(self, name: str) -> Tool:
        for t in self.tools:
            if t.name == name:
                return t
        raise KeyError(name)

    def run(self, payload):
        inp = self.input_model.model_validate(payload)
        log.info("Running %s", self.name)
        try:
            out = self.handler(self, inp)
        except (genai.GenAIUnavailable, genai.GenAIResponseError, genai_errors.APIError, httpx.HTTPError) as e:
            log.warning("%s failed: %s", self.name, e)
            raise FlowError(self.error_message) from e
        if out is None:
            raise FlowError(self.error_message)
        return self.output_model.model_validate(out)


# -------- Marketing suite --------
class MarketingInput(BaseModel):
    product_name: str = Field(min_length=1)
    product_description: str = Field(min_length=1)
    target_audience: str = Field(min_length=3)


class MarketingOutput(BaseModel):
    instagram_post: str
    facebook_post: str
    twitter_post: str
    tiktok_post: str
    email_newsletter: str
    ad_copy: str


marketing_flow = Flow(
    name="generateMarketingContentFlow",
    input_model=MarketingInput,
    output_model=MarketingOutput,
    prompt=prompts.MARKETING_CONTENT,
    error_message="Failed to generate marketing content. Please try again.",
)


# -------- Pricing optimizer --------
class PricingInput(BaseModel):
    product_name: str = Field(min_length=3)
    materials_cost: float = Field(ge=0)
    labor_cost: float = Field(ge=0)
    market_demand: str = Field(min_length=1)
    artisan_skill_level: str = Field(min_length=1)
    product_quality: str = Field(min_length=1)


class PricingOutput(BaseModel):
    suggested_price: float
    reasoning: str


pricing_flow = Flow(
    name="suggestOptimalPricingFlow",
    input_model=PricingInput,
    output_model=PricingOutput,
    prompt=prompts.OPTIMAL_PRICING,
    error_message="Failed to suggest a price. Please try again.",
)


# -------- Trend harmonizer --------
class TrendsInput(BaseModel):
    product_category: str = Field(min_length=2)
    product_description: str = Field(min_length=10)


class TrendsOutput(BaseModel):
    trend_analysis: str
    suggestions: str


trends_flow = Flow(
    name="harmonizeTrendsFlow",
    input_model=TrendsInput,
    output_model=TrendsOutput,
    prompt=prompts.TREND_HARMONIZER,
    error_message="Failed to analyze trends. Please try again.",
)


# -------- Description generator --------
class DescriptionInput(BaseModel):
    keywords: str = Field(min_length=10)
    style: Optional[str] = None


class DescriptionOutput(BaseModel):
    description: str = Field(min_length=1)


def _describe(flow: Flow, inp: DescriptionInput):
    prompt = flow.prompt.format(keywords=inp.keywords, style=inp.style or "Warm and authentic")
    return genai.generate_structured(prompt, flow.output_model)


description_flow = Flow(
    name="generateProductDescriptionFlow",
    input_model=DescriptionInput,
    output_model=DescriptionOutput,
    prompt=prompts.PRODUCT_DESCRIPTION,
    error_message="Failed to generate description. Please try again.",
    handler=_describe,
)


# -------- Translation --------
class TranslateInput(BaseModel):
    text: str
    target_language: Literal["English", "Hindi"]


class TranslateOutput(BaseModel):
    translated_text: str


def _translate(flow: Flow, inp: TranslateInput):
    if not inp.text.strip():
        return TranslateOutput(translated_text="")
    if not genai.is_available():
        # Without a model the text passes through untouched
        return TranslateOutput(translated_text=inp.text)
    return genai.generate_structured(flow.render(inp), flow.output_model)


translate_flow = Flow(
    name="translateTextFlow",
    input_model=TranslateInput,
    output_model=TranslateOutput,
    prompt=prompts.TRANSLATE_TEXT,
    error_message="Failed to translate text. Please try again.",
    handler=_translate,
)


# -------- Visual enhancer --------
class MockupInput(BaseModel):
    product_image: str = Field(min_length=1, description="data:<mimetype>;base64,<encoded_data>")
    scene_description: str = Field(min_length=10)


class MockupOutput(BaseModel):
    mockup_image: str


def _mockup(flow: Flow, inp: MockupInput):
    try:
        image = genai.generate_image(flow.prompt.format(scene_description=inp.scene_description), inp.product_image)
    except ValueError as e:
        raise genai.GenAIResponseError(str(e))
    if not image:
        raise genai.GenAIResponseError("No image returned")
    return MockupOutput(mockup_image=image)


mockup_flow = Flow(
    name="generateLifestyleMockupFlow",
    input_model=MockupInput,
    output_model=MockupOutput,
    prompt=prompts.LIFESTYLE_MOCKUP,
    error_message="Failed to generate image.",
    handler=_mockup,
)


# -------- Logistics advisor --------
METRO_MARKERS = ("delhi", "mumbai", "bangalore", "kolkata", "chennai")
REMOTE_MARKERS = ("northeast", "jammu", "kashmir", "ladakh")


def classify_destination(destination: str) -> str:
    dest = (destination or "").lower()
    if any(m in dest for m in METRO_MARKERS):
        return "metro"
    if any(m in dest for m in REMOTE_MARKERS):
        return "remote"
    if "india" not in dest:
        return "international"
    return "tier_2_city"


class ShippingRatesInput(BaseModel):
    weight_kg: float = Field(gt=0)
    destination: str = Field(min_length=1, description="Destination city and country, e.g. 'Mumbai, India'")


def get_shipping_rates(inp: ShippingRatesInput) -> List[ShippingRate]:
    """Mocked carrier quotes; a real deployment would call a shipping aggregator."""
    destination_type = classify_destination(inp.destination)
    if destination_type == "international":
        return [
            ShippingRate(carrier="DHL", service_type="International Express", total_cost=2500, estimated_delivery_date="5-8 days"),
            ShippingRate(carrier="FedEx", service_type="International Standard", total_cost=2200, estimated_delivery_date="7-10 days"),
        ]

    rates = [
        ShippingRate(carrier="Delhivery", service_type="Express", total_cost=120, estimated_delivery_date="2-3 days"),
        ShippingRate(carrier="Blue Dart", service_type="Standard", total_cost=110, estimated_delivery_date="3-5 days"),
        ShippingRate(carrier="India Post", service_type="Standard", total_cost=85, estimated_delivery_date="5-7 days"),
    ]
    if destination_type == "remote":
        rates[1].total_cost += 40
        rates.append(ShippingRate(carrier="India Post", service_type="Express", total_cost=150, estimated_delivery_date="4-6 days"))
    return rates


shipping_rates_tool = Tool(
    name="getShippingRates",
    description="Retrieves a list of available shipping carriers and their rates for a given package.",
    input_model=ShippingRatesInput,
    output_type=List[ShippingRate],
    fn=get_shipping_rates,
)


def sort_by_cost(options: List[ShippingRate]) -> List[ShippingRate]:
    return sorted(options, key=lambda o: o.total_cost)


class LogisticsInput(BaseModel):
    product_name: str = Field(min_length=1)
    product_material: str = ""
    package_weight_kg: float = Field(ge=0.1)
    package_dimensions_cm: PackageDimensions
    destination: str = Field(min_length=3)
    declared_value: float = Field(ge=1)


class CustomsAdvice(BaseModel):
    hs_code: str
    declaration_text: str


class LogisticsAdvice(BaseModel):
    """What the model writes; carrier quotes come from the rates tool."""
    packaging_advice: str
    customs_advice: Optional[CustomsAdvice] = None
    risk_and_insurance_advice: str
    carrier_choice_advice: str


class LogisticsOutput(LogisticsAdvice):
    shipping_options: List[ShippingRate]


def _logistics(flow: Flow, inp: LogisticsInput):
    tool = flow.tool("getShippingRates")
    options = sort_by_cost(tool({"weight_kg": inp.package_weight_kg, "destination": inp.destination}))

    dims = inp.package_dimensions_cm
    prompt = flow.prompt.format(
        product_name=inp.product_name,
        product_material=inp.product_material or "Not specified",
        package_weight_kg=inp.package_weight_kg,
        length=dims.length,
        width=dims.width,
        height=dims.height,
        destination=inp.destination,
        declared_value=inp.declared_value,
        tool_name=tool.name,
        tool_description=tool.description,
        shipping_options="\n".join(
            f"- {o.carrier} ({o.service_type}): ₹{o.total_cost:.2f}, {o.estimated_delivery_date}" for o in options
        ),
    )
    advice = genai.generate_structured(prompt, LogisticsAdvice)
    if classify_destination(inp.destination) != "international":
        advice.customs_advice = None
    return LogisticsOutput(**advice.model_dump(), shipping_options=options)


logistics_flow = Flow(
    name="getLogisticsAdviceFlow",
    input_model=LogisticsInput,
    output_model=LogisticsOutput,
    prompt=prompts.LOGISTICS_ADVISOR,
    error_message="The AI model failed to generate a logistics plan.",
    tools=(shipping_rates_tool,),
    handler=_logistics,
)


FLOWS = {
    f.name: f
    for f in (marketing_flow, pricing_flow, trends_flow, description_flow, translate_flow, mockup_flow, logistics_flow)
}
