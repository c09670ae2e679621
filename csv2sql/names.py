def sql_name_from_string(value: str) -> str:
    """Turn a file path or header cell into a table/column identifier.

    Drops a trailing ``.csv``, keeps the last ``/`` segment and replaces every
    character that is not a letter or digit with ``_``. Collisions are left alone.
    """
    if value.endswith(".csv"):
        value = value[: -len(".csv")]
    # get the last part of the path
    value = value.split("/")[-1]
    return "".join(c if c.isalpha() or c.isnumeric() else "_" for c in value)
