"""Vaccination reminder engine (age parsing, due-date projection, materializer,
dispatch sweep and the Celery beat schedule that drives it).

The API process calls the materializer inline when a baby is added or its
birth date changes; the Celery worker/beat pair runs the two daily sweeps.
"""
