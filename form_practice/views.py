from django.views.generic.base import TemplateView

from contact.forms import ContactForm
from contact.state import FormState


class HomePageView(TemplateView):
    template_name = "homepage.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["form"] = ContactForm(initial=FormState().as_dict())
        return context
