from __future__ import annotations

from typing import Optional

import tldextract


# Bundled public suffix snapshot only; no network fetch at import or call time
_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())


def extract_apex_domain(url_or_domain: Optional[str]) -> Optional[str]:
    if not url_or_domain:
        return None
    text = str(url_or_domain).strip().lower()
    if not text:
        return None
    if not text.startswith('http://') and not text.startswith('https://'):
        text = f"http://{text}"
    ext = _EXTRACT(text)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return None
