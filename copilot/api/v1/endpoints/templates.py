# copilot/api/v1/endpoints/templates.py
from fastapi import APIRouter

from schemas.templates import RenderedTemplate, TemplateRenderRequest
from services.template_engine import template_engine

router = APIRouter()


@router.get("/")
def list_templates():
    """Available template kinds per channel."""
    return template_engine.available()


@router.post("/render", response_model=RenderedTemplate)
def render_template(body: TemplateRenderRequest):
    content = template_engine.render(
        body.channel,
        body.kind,
        itinerary=body.itinerary,
        customer_name=body.customer_name,
        customer_email=body.customer_email,
        agent_name=body.agent_name,
    )
    return RenderedTemplate(channel=body.channel, kind=body.kind, content=content)
