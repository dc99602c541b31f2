"""
Turn raw form entries into label-keyed records.
"""

from typing import Dict, Optional

from .schema import FormSchema

AUDIO_META_FIELD_LABEL = "audio_file_meta"


def build_key_table(schema: FormSchema) -> Dict[str, str]:
    """
    Get an entry-key -> label table from the form fields.

    Every field id maps to the field's admin label, falling back to its label.
    Fields with multiple inputs (first and last name, for example) also map
    each input key to that input's label; the parent id stays mapped too,
    though entries for such fields normally carry only the input keys.
    Keys are always strings so that
    composite keys like "21.3" are never treated as numbers.
    """
    key_table: Dict[str, str] = {}

    for form_field in schema.fields:
        key_table[str(form_field.id)] = form_field.resolved_label

        for sub_input in form_field.inputs:
            # Inputs without a key can't hold values
            if not sub_input.key:
                continue
            key_table[str(sub_input.key)] = sub_input.label

    return key_table


def resolve(schema: FormSchema, entry: Dict[str, Optional[str]]) -> Dict[str, Optional[str]]:
    """
    Resolve a raw entry into a record keyed by field label.

    Only keys known to the schema and present in the entry are kept; missing
    values are omitted rather than filled with None. When two keys resolve to
    the same label, the later one in schema order wins.
    """
    entry = {str(key): value for key, value in entry.items()}
    record: Dict[str, Optional[str]] = {}

    for key, label in build_key_table(schema).items():
        if key in entry:
            record[str(label)] = entry[key]

    return record


def find_audio_meta_field(schema: FormSchema) -> Optional[str]:
    """Return the DOM input id of the hidden audio meta field, if the form has one."""
    for form_field in schema.fields:
        if form_field.label == AUDIO_META_FIELD_LABEL:
            return f"input_{schema.id}_{form_field.id}"
    return None
