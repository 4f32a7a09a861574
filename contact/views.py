import json
import logging

from django.http import JsonResponse
from django.shortcuts import render
from django.views.decorators.http import require_http_methods, require_POST

from contact.forms import ContactForm
from contact.state import FIELD_NAMES, FormState, Submit, reduce, state_from_fields

logger = logging.getLogger("django_form_practice")


@require_http_methods(["GET", "POST"])
def form_view(request):
    submitted = False

    if request.method == "POST":
        form = ContactForm(request.POST)
        # raw posted strings, the form only renders them back
        state = state_from_fields(request.POST)
        reduce(state, Submit())
        submitted = True
    else:
        form = ContactForm(initial=FormState().as_dict())

    return render(request, "contact/form.html", {"form": form, "submitted": submitted})


@require_POST
def submit_view(request):
    """JSON submit used by the page script, so the browser never navigates."""
    try:
        payload = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(e)
        return JsonResponse({"error": "Invalid JSON"}, status=400)

    if not isinstance(payload, dict):
        logger.error(f"Submit payload is not an object: {type(payload).__name__}")
        return JsonResponse({"error": "Expected a JSON object"}, status=400)

    unknown = sorted(key for key in payload if key not in FIELD_NAMES)
    if unknown:
        logger.error(f"Unknown fields in submit: {unknown}")
        return JsonResponse({"error": "Unknown fields", "fields": unknown}, status=400)

    not_strings = [key for key in FIELD_NAMES if key in payload and not isinstance(payload[key], str)]
    if not_strings:
        logger.error(f"Non-string values in submit: {not_strings}")
        return JsonResponse({"error": "Field values must be strings", "fields": not_strings}, status=400)

    state = state_from_fields(payload)
    reduce(state, Submit())

    return JsonResponse(state.as_dict())
