"""
Issue and result records produced by input validation.
"""

from typing import Dict, List, Any, Optional, Union
from pathlib import Path
import json
from dataclasses import dataclass, field, asdict
from enum import Enum


class ValidationSeverity(Enum):
    """Validation severity levels"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ValidationIssue:
    """One problem found in an input batch; row is 1-based"""
    severity: ValidationSeverity
    category: str
    message: str
    row: Optional[int] = None
    item_id: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of validating one input batch"""
    is_valid: bool
    issues: List[ValidationIssue]
    summary: Dict[str, Any] = field(default_factory=dict)
    execution_time: float = 0.0

    @property
    def errors(self) -> List[str]:
        """Messages of the error-level issues, in row order"""
        return [issue.message for issue in self.issues
                if issue.severity is ValidationSeverity.ERROR]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        data = asdict(self)
        for issue in data['issues']:
            issue['severity'] = issue['severity'].value
        return data

    def to_json(self, file_path: Optional[Union[str, Path]] = None) -> str:
        """Convert to JSON string or save to file"""
        json_str = json.dumps(self.to_dict(), indent=2, default=str)

        if file_path:
            with open(file_path, 'w') as f:
                f.write(json_str)

        return json_str
