# apps/users/forms.py
from django import forms
from allauth.account.forms import SignupForm
from django.utils.text import slugify

from .models import Profile


class EmailSignupForm(SignupForm):
    """
    Signup form used by allauth (ACCOUNT_FORMS["signup"]).
    email / password1 / password2 come from SignupForm; full_name goes to the profile.
    """
    full_name = forms.CharField(max_length=150, label="Full name")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if "username" in self.fields:
            self.fields["username"].required = True
            self.fields["username"].label = "Username"
            self.fields["username"].help_text = ""

    def clean_username(self):
        # slugify before allauth checks the name is free
        username = self.cleaned_data.get("username") or ""
        self.cleaned_data["username"] = slugify(username) or username
        return super().clean_username()

    def clean_full_name(self):
        return self.cleaned_data["full_name"].strip()


class ProfileForm(forms.ModelForm):
    class Meta:
        model = Profile
        fields = ["full_name", "bio", "avatar_url"]
        widgets = {
            "bio": forms.Textarea(attrs={"rows": 4}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["full_name"].required = True

    def clean_full_name(self):
        full_name = (self.cleaned_data.get("full_name") or "").strip()
        if not full_name:
            raise forms.ValidationError("Name cannot be empty")
        return full_name
