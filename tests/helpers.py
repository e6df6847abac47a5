from typing import Dict


def make_row(**fields) -> Dict[str, str]:
    """A raw CSV row with the core columns blank, overridden by ``fields``."""
    row = {
        "ID": "",
        "Property": "",
        "Project Name": "",
        "Developer": "",
        "Type of Property": "",
        "City": "",
        "Area Name": "",
        "Price": "",
        "Carpet Area": "",
        "bedroom": "",
        "Possession Status": "",
    }
    row.update(fields)
    return row
