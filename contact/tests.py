import json
from unittest.mock import MagicMock, patch

from django.test import TestCase, Client
from django.urls import reverse

from contact.forms import ContactForm
from contact.state import (
    FIELD_NAMES,
    FieldChange,
    FormController,
    FormState,
    InvalidFieldValueError,
    Submit,
    UnknownFieldError,
    change_field,
    reduce,
    state_from_fields,
    submit,
)


class FormStateTestCase(TestCase):

    def test_initial_state_is_empty(self):
        self.assertEqual(FormState().as_dict(), {"name": "", "email": "", "message": ""})

    def test_as_dict_keys_follow_field_names(self):
        self.assertEqual(tuple(FormState().as_dict()), FIELD_NAMES)

    def test_change_field_replaces_only_that_key(self):
        state = FormState(name="Ann", email="a@x.com", message="Hi")
        new_state = change_field(state, "email", "b@y.org")

        self.assertEqual(new_state.as_dict(), {"name": "Ann", "email": "b@y.org", "message": "Hi"})
        # the old value is left alone
        self.assertEqual(state.email, "a@x.com")

    def test_last_write_wins(self):
        state = FormState()
        for value in ["A", "An", "Ann", "Anna", "Ann"]:
            state = change_field(state, "name", value)

        self.assertEqual(state.name, "Ann")
        self.assertEqual(state.email, "")
        self.assertEqual(state.message, "")

    def test_change_unknown_field(self):
        with self.assertRaises(UnknownFieldError):
            change_field(FormState(), "phone", "123")

    def test_change_field_non_string(self):
        with self.assertRaises(InvalidFieldValueError):
            change_field(FormState(), "name", 5)

    def test_submit_sends_current_mapping_to_sink(self):
        sink = MagicMock()
        submit(FormState(name="Ann", email="a@x.com", message="Hi"), sink)

        sink.assert_called_once_with({"name": "Ann", "email": "a@x.com", "message": "Hi"})

    def test_submit_logs_by_default(self):
        with self.assertLogs("django_form_practice", level="INFO") as cm:
            submit(FormState(name="Ann"))

        self.assertEqual(len(cm.output), 1)
        self.assertIn("Form Data: {'name': 'Ann', 'email': '', 'message': ''}", cm.output[0])

    def test_reduce_submit_returns_same_state(self):
        sink = MagicMock()
        state = FormState(message="Hi")

        self.assertIs(reduce(state, Submit(), sink), state)
        sink.assert_called_once_with({"name": "", "email": "", "message": "Hi"})

    def test_reduce_field_change(self):
        state = reduce(FormState(), FieldChange("message", "Hello"))
        self.assertEqual(state, FormState(message="Hello"))

    def test_reduce_unknown_message(self):
        with self.assertRaises(TypeError):
            reduce(FormState(), "submit")

    def test_state_from_fields_ignores_extra_and_defaults_missing(self):
        state = state_from_fields({"name": "Ann", "csrfmiddlewaretoken": "abc"})
        self.assertEqual(state.as_dict(), {"name": "Ann", "email": "", "message": ""})


class FormControllerTestCase(TestCase):

    def setUp(self):
        self.sink = MagicMock()
        self.controller = FormController(sink=self.sink)

    def test_immediate_submit_is_empty(self):
        self.controller.submit()
        self.sink.assert_called_once_with({"name": "", "email": "", "message": ""})

    def test_edits_then_submit(self):
        self.controller.change("name", "Ann")
        self.controller.change("email", "a@x.com")
        self.controller.change("message", "Hi")
        self.controller.submit()

        self.sink.assert_called_once_with({"name": "Ann", "email": "a@x.com", "message": "Hi"})

    def test_resubmit_without_edits_is_idempotent(self):
        self.controller.change("name", "Ann")
        self.controller.submit()
        self.controller.submit()

        self.assertEqual(self.sink.call_count, 2)
        first, second = self.sink.call_args_list
        self.assertEqual(first, second)

    def test_submit_does_not_reset_state(self):
        self.controller.change("message", "Hi")
        self.controller.submit()
        self.assertEqual(self.controller.state.message, "Hi")

    def test_dispatch_returns_new_state(self):
        state = self.controller.dispatch(FieldChange("email", "a@x.com"))
        self.assertIs(state, self.controller.state)
        self.assertEqual(state.email, "a@x.com")

    def test_unknown_field_leaves_state_untouched(self):
        self.controller.change("name", "Ann")
        with self.assertRaises(UnknownFieldError):
            self.controller.change("phone", "123")
        self.assertEqual(self.controller.state, FormState(name="Ann"))


class ContactFormTestCase(TestCase):

    def test_empty_form_is_valid(self):
        form = ContactForm({})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.cleaned_data, {"name": "", "email": "", "message": ""})

    def test_values_are_not_stripped(self):
        form = ContactForm({"name": "  Ann  ", "email": "not-an-email", "message": "Hi\n"})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.cleaned_data["name"], "  Ann  ")
        self.assertEqual(form.cleaned_data["email"], "not-an-email")


class ContactViewsTestCase(TestCase):

    def setUp(self):
        self.client = Client()

    def test_home_page_renders_form(self):
        response = self.client.get(reverse("home"))

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "homepage.html")
        self.assertContains(response, "Form Filling")
        self.assertContains(response, 'name="message"')

    def test_get_form(self):
        response = self.client.get(reverse("contact_form"))

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "contact/form.html")
        self.assertFalse(response.context["submitted"])
        self.assertContains(response, 'type="email"')
        self.assertContains(response, 'rows="4"')

    @patch("contact.state.log_form_data")
    def test_post_form_logs_and_keeps_values(self, log_pch):
        response = self.client.post(reverse("contact_form"), {
            "name": "Ann",
            "email": "a@x.com",
            "message": "Hi",
        })

        # the page is rendered again, no redirect
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["submitted"])
        self.assertContains(response, 'value="Ann"')
        log_pch.assert_called_once_with({"name": "Ann", "email": "a@x.com", "message": "Hi"})

    @patch("contact.state.log_form_data")
    def test_post_form_keeps_value_failing_field_validators(self, log_pch):
        # CharField rejects null characters, the logged value must still be the posted one
        response = self.client.post(reverse("contact_form"), {
            "name": "A\x00nn",
            "email": "a@x.com",
            "message": "Hi",
        })

        self.assertEqual(response.status_code, 200)
        log_pch.assert_called_once_with({"name": "A\x00nn", "email": "a@x.com", "message": "Hi"})

    @patch("contact.state.log_form_data")
    def test_post_form_and_json_submit_agree(self, log_pch):
        data = {"name": "A\x00nn", "email": "a@x.com", "message": "Hi"}
        self.client.post(reverse("contact_form"), data)
        self.client.post(reverse("contact_submit"), json.dumps(data), content_type="application/json")

        first, second = log_pch.call_args_list
        self.assertEqual(first, second)

    def test_page_script_only_logs_successful_submits(self):
        response = self.client.get(reverse("contact_form"))
        self.assertContains(response, "if (response.ok)")
        self.assertContains(response, "Submit failed: ")

    def test_post_empty_form(self):
        with self.assertLogs("django_form_practice", level="INFO") as cm:
            response = self.client.post(reverse("contact_form"), {})

        self.assertEqual(response.status_code, 200)
        self.assertIn("{'name': '', 'email': '', 'message': ''}", cm.output[0])

    def test_form_method_not_allowed(self):
        response = self.client.put(reverse("contact_form"))
        self.assertEqual(response.status_code, 405)

    @patch("contact.state.log_form_data")
    def test_submit_json(self, log_pch):
        data = {"name": "Ann", "email": "a@x.com", "message": "Hi"}
        response = self.client.post(reverse("contact_submit"), json.dumps(data),
                                    content_type="application/json")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), data)
        log_pch.assert_called_once_with(data)

    @patch("contact.state.log_form_data")
    def test_submit_json_twice_gives_same_mapping(self, log_pch):
        data = {"name": "Ann"}
        first = self.client.post(reverse("contact_submit"), json.dumps(data), content_type="application/json")
        second = self.client.post(reverse("contact_submit"), json.dumps(data), content_type="application/json")

        self.assertEqual(first.json(), second.json())
        self.assertEqual(first.json(), {"name": "Ann", "email": "", "message": ""})
        self.assertEqual(log_pch.call_count, 2)

    def test_submit_json_empty_object(self):
        response = self.client.post(reverse("contact_submit"), "{}", content_type="application/json")
        self.assertEqual(response.json(), {"name": "", "email": "", "message": ""})

    def test_submit_invalid_json(self):
        response = self.client.post(reverse("contact_submit"), "{not json", content_type="application/json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid JSON"})

    def test_submit_json_not_object(self):
        with self.assertLogs("django_form_practice", level="ERROR"):
            response = self.client.post(reverse("contact_submit"), "[1, 2]", content_type="application/json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Expected a JSON object"})

    @patch("contact.state.log_form_data")
    def test_submit_json_unknown_fields(self, log_pch):
        response = self.client.post(reverse("contact_submit"), json.dumps({"name": "Ann", "phone": "1"}),
                                    content_type="application/json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Unknown fields", "fields": ["phone"]})
        log_pch.assert_not_called()

    def test_submit_json_non_string_value(self):
        with self.assertLogs("django_form_practice", level="ERROR") as cm:
            response = self.client.post(reverse("contact_submit"), json.dumps({"name": 5}),
                                        content_type="application/json")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Field values must be strings", "fields": ["name"]})
        self.assertIn("Non-string values in submit: ['name']", cm.output[0])

    def test_submit_json_get_not_allowed(self):
        response = self.client.get(reverse("contact_submit"))
        self.assertEqual(response.status_code, 405)
