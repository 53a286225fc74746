"""API schemas for scrobble reports."""

from pydantic import BaseModel, Field

from mljboard.application.use_cases import ScrobbleReport


class ReportFieldSchema(BaseModel):
    """One labelled value, rendered the way chat shows it."""

    name: str
    value: str = Field(..., description="Count, or a bracketed error like [cancelled]")
    error: str | None = Field(default=None, description="Error kind if the count failed")


class ScrobbleReportResponse(BaseModel):
    """Schema for a scrobble report."""

    title: str
    fields: list[ReportFieldSchema]
    fetch_id: str | None = Field(
        default=None, description="Id that could cancel this fetch while it ran"
    )

    @classmethod
    def from_report(
        cls, report: ScrobbleReport, fetch_id: str | None = None
    ) -> "ScrobbleReportResponse":
        return cls(
            title=report.title,
            fields=[
                ReportFieldSchema(
                    name=f.name,
                    value=f.value,
                    error=str(f.result.error) if f.result.error is not None else None,
                )
                for f in report.fields
            ],
            fetch_id=fetch_id,
        )


class CancelResponse(BaseModel):
    """Schema for a cancel request."""

    fetch_id: str
    cancelled: bool = Field(..., description="False if no such fetch was running")
