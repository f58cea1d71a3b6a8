from abc import ABC, abstractmethod
from typing import Any, Optional
import logging
from enum import Enum

from idnakit.core.config import IDNAOptions
from idnakit.core.errors import IDNAError
from idnakit.core.table import MappingTable


class Direction(Enum):
    """Conversion direction"""
    TO_UNICODE = "to_unicode"
    TO_ASCII = "to_ascii"


class BaseProcessor(ABC):
    """
    Lớp trừu tượng cơ sở cho mọi bộ xử lý IDNA.

    Chức năng cung cấp:
    - Tiêm phụ thuộc (table, options, logger)
    - Các hook vòng đời (pre_execute, post_execute)
    - Mẫu xử lý lỗi

    Các lớp con bắt buộc phải cài đặt:
    - name: Tên của bộ xử lý (dùng cho logger)
    - execute: Logic xử lý chính

    Processors keep no per-call state, so one instance can be shared
    between threads.
    """

    def __init__(
        self,
        table: MappingTable,
        options: IDNAOptions,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize processor with dependencies.

        Args:
            table: Mapping table, shared by reference and never mutated
            options: Processing flags
            logger: Standard Python logger (defaults to 'idnakit.<name>')
        """
        self.table: MappingTable = table
        self.options: IDNAOptions = options
        self.logger: logging.Logger = logger or logging.getLogger(f"idnakit.{self.name}")

    # ========================================
    # ABSTRACT METHODS (Must Override)
    # ========================================

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Processor name.

        Returns:
            Short identifier (e.g., "label")
        """
        pass

    @abstractmethod
    def execute(self, value: Any, *args: Any, **kwargs: Any) -> Any:
        """
        Process one value.

        Bad input is reported in the returned result, never raised.

        Returns:
            LabelResult or DomainResult, depending on the processor
        """
        pass

    def pre_execute(self, value: Any) -> Any:
        """
        Hook called before execute().

        Returns:
            The value to pass to execute()

        Raises:
            IDNAError: To reject the input outright
        """
        return value

    def post_execute(self, value: Any, result: Any) -> None:
        """
        Hook called after execute().

        Args:
            value: The input passed to execute()
            result: The result from execute()
        """
        if not result.success:
            codes = ", ".join(code.value for code in result.errors)
            self.logger.debug(f"{self.name} {value!r} failed: {codes}")

    def run(self, value: Any, *args: Any, **kwargs: Any) -> Any:
        """
        Xử lý một giá trị với đầy đủ vòng đời.

        Đây là điểm vào chính mà nên được gọi từ bên ngoài.
        Hàm này chịu trách nhiệm:
        - Chạy hook tiền xử lý (pre_execute)
        - Thực thi logic chính (execute)
        - Chạy hook hậu xử lý (post_execute)
        - Ghi log ngoại lệ không mong đợi

        Trả về:
            Kết quả của execute()
        """
        try:
            value = self.pre_execute(value)
            result = self.execute(value, *args, **kwargs)
            self.post_execute(value, result)
            return result

        except IDNAError:
            raise
        except Exception as e:
            # Unexpected failure
            self.logger.error(f"{self.name} failed on {value!r}: {e}", exc_info=True)
            raise

    def __repr__(self):
        return f"<{self.__class__.__name__} options={self.options}>"
