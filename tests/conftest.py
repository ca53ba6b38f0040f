"""Sample messages shared by the test modules."""

import pytest

PHISHING_EML = """Received: from mail-evil.attacker.com (mail-evil.attacker.com [185.234.72.19])
        by mx.victim.com with ESMTP id abc123
        for <john.doe@company.com>; Sat, 4 Jan 2025 10:30:00 -0500
Authentication-Results: mx.victim.com;
        spf=fail smtp.mailfrom=security@paypal.com;
        dkim=fail;
        dmarc=fail header.from=paypal.com
Received-SPF: fail (domain of paypal.com does not designate 185.234.72.19 as permitted sender)
From: PayPal Security Team <security@paypal.com>
Reply-To: paypal-verify-account@gmail.com
Return-Path: <bounces@attacker-domain.xyz>
To: john.doe@company.com
Subject: URGENT: Your PayPal Account Has Been Limited
Date: Sat, 4 Jan 2025 10:30:00 -0500
X-Originating-IP: [185.234.72.19]
MIME-Version: 1.0
Content-Type: text/plain; charset="UTF-8"

Dear John Doe,

URGENT: Your account has been limited! Verify immediately at:
https://paypa1-secure-verify.bit.ly/account/restore
https://www.paypal-security-check.com/verify.php

Enter your password and SSN: 123-45-6789
Call us at 1-800-555-0123 or email support@paypal-help.net
"""

CLEAN_EML = """Received: from mail.example.com (mail.example.com [203.0.113.5])
        by mx.example.org with ESMTP id def456; Mon, 6 Jan 2025 09:00:00 +0000
Authentication-Results: mx.example.org;
        spf=pass smtp.mailfrom=example.com;
        dkim=pass header.d=example.com;
        dmarc=pass header.from=example.com
From: Alice <alice@example.com>
Reply-To: alice@example.com
Return-Path: <alice@example.com>
To: bob@example.org
Subject: Lunch on Friday
Date: Mon, 6 Jan 2025 09:00:00 +0000
MIME-Version: 1.0
Content-Type: text/plain; charset="UTF-8"

Bob, are we still on for lunch on Friday? See you at noon.
"""

INVOICE_PAYLOAD_B64 = "TVqQAAMAAAAEAAAA//8AAA=="

INVOICE_EML = f"""From: billing@vendor.test
To: ap@corp.test
Subject: Invoice
MIME-Version: 1.0
Content-Type: multipart/mixed; boundary="XYZ"

--XYZ
Content-Type: text/plain; charset="utf-8"

Please find the invoice attached.
--XYZ
Content-Type: application/octet-stream; name="invoice.exe"
Content-Disposition: attachment; filename="invoice.exe"
Content-Transfer-Encoding: base64

{INVOICE_PAYLOAD_B64}
--XYZ--
"""


@pytest.fixture
def phishing_bytes() -> bytes:
    return PHISHING_EML.encode("utf-8")


@pytest.fixture
def clean_bytes() -> bytes:
    return CLEAN_EML.encode("utf-8")


@pytest.fixture
def invoice_bytes() -> bytes:
    return INVOICE_EML.encode("utf-8")
