"""Endpoint groups exposed as attributes of :class:`~creeble.api.Creeble`."""

from creeble.endpoints.data import Data
from creeble.endpoints.forms import FormValidationResult, Forms
from creeble.endpoints.projects import Projects

__all__ = ["Data", "FormValidationResult", "Forms", "Projects"]
