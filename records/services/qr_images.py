"""
QR image rendering.

The renderer used by :class:`records.repositories.patient_qrs.PatientQrRepository`
is configurable through ``settings.QR_IMAGE_RENDERER`` (a dotted path to a
callable taking the token and returning a data URI).
"""
from django.conf import settings
from django.utils.module_loading import import_string

import segno


def render_png_data_uri(token: str) -> str:
    qr = segno.make(token, error='m', micro=False)
    return qr.png_data_uri(scale=4, border=1, dark='#000000', light='#ffffff')


def get_renderer():
    return import_string(settings.QR_IMAGE_RENDERER)
