"""Institute Analytics package.

Attendance marking (manual, bulk and barcode scan) plus the aggregation core
behind the financial, attendance and academic reports. Organized by feature
modules with a thin Flask controller layer over service/repository layers.
"""
