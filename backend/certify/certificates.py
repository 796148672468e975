from __future__ import annotations
import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from .errors import StorageError
from .models import ExamResult
from .policy import issues_certificate
from .settings import settings


logger = logging.getLogger(__name__)


def certificate_filename(result_id: str) -> str:
	return f"certificate_{result_id}.pdf"


def build_certificate_pdf(result: ExamResult, issued_at: Optional[datetime] = None) -> bytes:
	"""Single A4 page: title, recipient, certification, step/level, score, issue time."""
	issued = (issued_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")

	buf = io.BytesIO()
	doc = SimpleDocTemplate(
		buf, pagesize=A4,
		leftMargin=1.7 * cm, rightMargin=1.7 * cm,
		topMargin=1.7 * cm, bottomMargin=1.7 * cm,
		title="Certificate of Achievement",
	)
	styles = getSampleStyleSheet()
	title = ParagraphStyle("CertTitle", parent=styles["Title"], fontSize=22, leading=28, alignment=TA_CENTER)
	lead = ParagraphStyle("CertLead", parent=styles["Normal"], fontSize=16, leading=20, alignment=TA_CENTER)
	name = ParagraphStyle("CertName", parent=styles["Normal"], fontSize=20, leading=26, alignment=TA_CENTER)
	body = ParagraphStyle("CertBody", parent=styles["Normal"], fontSize=14, leading=18, alignment=TA_CENTER)
	small = ParagraphStyle("CertSmall", parent=styles["Normal"], fontSize=12, leading=15, alignment=TA_CENTER)
	footer = ParagraphStyle("CertFooter", parent=styles["Normal"], fontSize=10, leading=13, alignment=TA_CENTER)

	story = [
		Paragraph("Certificate of Achievement", title),
		Spacer(1, 1.2 * cm),
		Paragraph("This certifies that", lead),
		Spacer(1, 0.4 * cm),
		Paragraph(f"<u>{escape(result.name)}</u>", name),
		Spacer(1, 0.5 * cm),
		Paragraph(f"has achieved: {escape(result.certification)}", body),
		Spacer(1, 0.5 * cm),
		Paragraph(f"Step: {result.step} | Level recorded: {escape(result.level or '')}", small),
		Spacer(1, 0.3 * cm),
		Paragraph(f"Score: {result.score} / {result.total} ({result.percentage:.2f}%)", small),
		Spacer(1, 1.0 * cm),
		Paragraph(f"Issued: {issued}", footer),
	]
	doc.build(story)
	return buf.getvalue()


class CertificateRenderer:
	def __init__(self, directory: Optional[str] = None, url_prefix: Optional[str] = None) -> None:
		self.directory = Path(directory or settings.certs_dir)
		self.url_prefix = (url_prefix or settings.certs_url_prefix).rstrip("/")

	def path_for(self, result_id: str) -> Path:
		return self.directory / certificate_filename(result_id)

	def url_for(self, result_id: str) -> str:
		return f"{self.url_prefix}/{certificate_filename(result_id)}"

	def render(self, result: ExamResult) -> Optional[str]:
		"""Write the certificate for a qualifying result and return its URL.

		Returns None when the certification earns no certificate, removing any
		file left by an earlier passing attempt under the same result id.
		Rendering the same result again overwrites the same file.
		"""
		path = self.path_for(result.id)
		if not issues_certificate(result.certification):
			try:
				path.unlink(missing_ok=True)
			except OSError as exc:
				logger.exception("Failed to remove stale certificate %s", path)
				raise StorageError(f"Failed to remove certificate for result {result.id}") from exc
			return None
		pdf = build_certificate_pdf(result)
		try:
			self.directory.mkdir(parents=True, exist_ok=True)
			path.write_bytes(pdf)
		except OSError as exc:
			logger.exception("Failed to write certificate %s", path)
			raise StorageError(f"Failed to write certificate for result {result.id}") from exc
		logger.info("Certificate written for result %s (%s)", result.id, result.certification)
		return self.url_for(result.id)

	def url_if_exists(self, result_id: str, certification: str) -> Optional[str]:
		if not issues_certificate(certification):
			return None
		if self.path_for(result_id).is_file():
			return self.url_for(result_id)
		return None


def get_renderer() -> CertificateRenderer:
	return CertificateRenderer()
