import logging

logger = logging.getLogger(__name__)

def pulse_safely(pulse):
	"""Fire the haptic/visual pulse hook; a broken hook never fails a commit."""
	if pulse is None:
		return
	try:
		pulse()
	except Exception:
		logger.warning("Feedback pulse failed", exc_info=True)
