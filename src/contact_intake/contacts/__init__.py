from contact_intake.contacts.models import ContactRecord
from contact_intake.contacts.validation import validate_record

__all__ = ["ContactRecord", "validate_record"]
