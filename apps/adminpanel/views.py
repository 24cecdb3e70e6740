import logging

from django.contrib import messages
from django.db import DatabaseError
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.functional import cached_property
from django.views.generic import CreateView, DeleteView, ListView, TemplateView, UpdateView

from .panels import PANELS, get_panel
from .permissions import AdminRoleRequiredMixin

logger = logging.getLogger(__name__)


class PanelMixin(AdminRoleRequiredMixin):
    """Resolves ``self.panel`` from the ``panel`` URL kwarg once the role check has passed."""

    @cached_property
    def panel(self):
        return get_panel(self.kwargs.get("panel"))

    def get_queryset(self):
        return self.panel.queryset()

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["panel"] = self.panel
        context["panels"] = PANELS.values()
        return context

    def get_success_url(self):
        return reverse("adminpanel:list", kwargs={"panel": self.panel.slug})


class AdminDashboardView(AdminRoleRequiredMixin, TemplateView):
    template_name = "adminpanel/dashboard.html"

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context["panels"] = [
            {"panel": panel, "count": panel.model.objects.count()}
            for panel in PANELS.values()
        ]
        return context


class PanelListView(PanelMixin, ListView):
    template_name = "adminpanel/list.html"
    context_object_name = "items"
    paginate_by = 50

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        columns = self.panel.list_columns
        context["columns"] = columns
        context["rows"] = [
            (obj, [getattr(obj, column) for column in columns])
            for obj in context["items"]
        ]
        return context


class PanelFormMixin(PanelMixin):
    template_name = "adminpanel/form.html"
    action_label = ""

    def get_form_class(self):
        return self.panel.form_class

    def form_valid(self, form):
        try:
            self.object = form.save()
        except DatabaseError:
            logger.exception("%s %s failed", self.action_label, self.panel.slug)
            messages.error(self.request, f"Failed to {self.action_label.lower()} {self.panel.verbose_name}")
            return self.form_invalid(form)

        logger.info("%s %s #%s", self.action_label, self.panel.slug, self.object.pk)
        messages.success(self.request, f"{self.panel.verbose_name.capitalize()} {self.success_verb} successfully")
        return redirect(self.get_success_url())


class PanelCreateView(PanelFormMixin, CreateView):
    action_label = "Add"
    success_verb = "added"


class PanelUpdateView(PanelFormMixin, UpdateView):
    action_label = "Update"
    success_verb = "updated"


class PanelDeleteView(PanelMixin, DeleteView):
    """GET shows the confirmation prompt, POST deletes."""
    template_name = "adminpanel/confirm_delete.html"

    def form_valid(self, form):
        self.object = self.get_object()
        try:
            self.object.delete()
        except DatabaseError:
            logger.exception("Delete %s #%s failed", self.panel.slug, self.object.pk)
            messages.error(self.request, f"Failed to delete {self.panel.verbose_name}")
        else:
            messages.success(self.request, f"{self.panel.verbose_name.capitalize()} deleted successfully")
        return redirect(self.get_success_url())
