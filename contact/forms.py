# contact/forms.py
from django import forms


class ContactForm(forms.Form):
    # no server side checks, the browser's native ones are all the form gets
    name = forms.CharField(
        label="Name", required=False, strip=False,
        widget=forms.TextInput(attrs={"class": "form-control"}),
    )
    email = forms.CharField(
        label="Email", required=False, strip=False,
        widget=forms.EmailInput(attrs={"class": "form-control"}),
    )
    message = forms.CharField(
        label="Message", required=False, strip=False,
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 4}),
    )
