"""RaiAccept transaction response codes"""

from typing import NamedTuple

from src.service.reconciliation.domain.enum.reconciliation_enum import ResponseCodeType


class CodeInfo(NamedTuple):
    type: ResponseCodeType
    description: str


_S, _D, _E, _T = (
    ResponseCodeType.SUCCESS,
    ResponseCodeType.DECLINE,
    ResponseCodeType.ERROR,
    ResponseCodeType.TECHNICAL,
)

RESPONSE_CODES: dict[str, CodeInfo] = {
    '0000': CodeInfo(_S, 'Transaction successful'),
    '1001': CodeInfo(_D, 'Decline by Issuer: Suspected fraud'),
    '1002': CodeInfo(_D, 'Decline by Issuer: Card issue, contact bank'),
    '1003': CodeInfo(_D, 'Card issue, contact bank or use another payment method'),
    '1004': CodeInfo(_D, 'Decline by Issuer: Transaction not permitted'),
    '1005': CodeInfo(_D, 'Decline by Issuer: Card reported as lost'),
    '1006': CodeInfo(_D, 'Decline by Issuer: Card reported as stolen'),
    '1007': CodeInfo(_E, 'Duplicate transaction detected'),
    '1008': CodeInfo(_E, 'Invalid referencing transaction'),
    '1009': CodeInfo(_E, 'Currency not supported'),
    '2001': CodeInfo(_D, 'Restricted card (embargoes)'),
    '2002': CodeInfo(_E, 'Invalid Merchant ID'),
    '2003': CodeInfo(_E, 'Invalid amount format'),
    '2004': CodeInfo(_D, 'Insufficient funds'),
    '2005': CodeInfo(_E, 'Refund amount exceeds original transaction'),
    '2006': CodeInfo(_D, '3-D Secure authentication failed'),
    '2007': CodeInfo(_D, '3DS failed: Unknown device'),
    '2008': CodeInfo(_D, '3DS failed: Unsupported device'),
    '2009': CodeInfo(_D, '3DS frequency limit exceeded'),
    '2010': CodeInfo(_D, '3DS: No card records exist'),
    '2011': CodeInfo(_D, '3DS security failure'),
    '2012': CodeInfo(_D, '3DS: Card not enrolled'),
    '2013': CodeInfo(_D, '3DS: Max challenges exceeded'),
    '2014': CodeInfo(_D, 'NPA transaction not supported by issuer'),
    '2015': CodeInfo(_D, 'Merchant Initiated Auth (3RI) not supported'),
    '2016': CodeInfo(_T, '3DS Access Control Server unreachable'),
    '2017': CodeInfo(_E, 'Decoupled 3DS Authentication expected'),
    '2018': CodeInfo(_D, 'Decoupled Auth timeout'),
    '2019': CodeInfo(_E, 'Insufficient time for Decoupled Auth'),
    '2020': CodeInfo(_D, '3DS authentication not performed by consumer'),
    '2021': CodeInfo(_T, '3DS ACS timeout'),
    '2022': CodeInfo(_D, 'Daily/monthly limits exceeded'),
    '3001': CodeInfo(_D, 'Strong Customer Authentication required (Soft Decline)'),
    '3002': CodeInfo(_D, 'Expired card'),
    '3003': CodeInfo(_E, 'Invalid card/account number'),
    '3004': CodeInfo(_E, 'Invalid expiration date'),
    '3005': CodeInfo(_E, 'Incorrect CVV'),
    '3006': CodeInfo(_T, 'Technical error with processor'),
    '3007': CodeInfo(_T, 'Technical error with payment schemes'),
    '3008': CodeInfo(_E, 'Invalid 3DS transaction'),
    '3009': CodeInfo(_D, 'Suspected risk - low confidence'),
    '3010': CodeInfo(_D, 'Suspected risk - medium confidence'),
    '3011': CodeInfo(_D, 'Suspected risk - high confidence'),
    '3012': CodeInfo(_D, 'Suspected risk - very high confidence'),
    '3013': CodeInfo(_D, 'Preferred authentication method not supported'),
    '3014': CodeInfo(_D, 'Content Security Policy validation failed'),
    '3015': CodeInfo(_E, 'Issuing Bank invalid or unknown'),
    '3016': CodeInfo(_T, 'Issuing Bank unreachable'),
    '3017': CodeInfo(_D, 'Possible security issue with card'),
    '4001': CodeInfo(_D, 'Generic refusal from card issuer'),
    '5001': CodeInfo(_E, 'Too many transaction retries'),
    '5002': CodeInfo(_D, 'Risk-related rule prevents transaction'),
    '6001': CodeInfo(_T, 'Cannot insert into batch file for capture'),
    '6002': CodeInfo(_T, 'No batch response file for capture'),
    '6003': CodeInfo(_T, 'Batch file transaction count mismatch'),
    '6004': CodeInfo(_T, 'Identifier field missing in batch processing'),
    '6005': CodeInfo(_T, 'Unknown error during batch processing'),
    '6006': CodeInfo(_T, 'Duplicate batch file sent'),
    '6007': CodeInfo(_T, 'Duplicate transaction in batch file'),
    '6008': CodeInfo(_T, 'Technical error with 3DS processing'),
    '6009': CodeInfo(_T, 'Technical error in Risk module'),
    '7001': CodeInfo(_E, 'Refund: Invalid data'),
    '7002': CodeInfo(_T, 'Processor response missing critical data'),
    '7003': CodeInfo(_T, 'Tokenizer service technical error'),
    '7004': CodeInfo(_T, 'Technical error - try again shortly'),
    '7005': CodeInfo(_E, 'Data validation error'),
    '7006': CodeInfo(_T, 'Transaction timeout - cancelled by Gateway'),
    '7007': CodeInfo(_T, 'Reversal request technical error'),
    '7008': CodeInfo(_D, 'Authentication declined by 3DS router'),
    '7009': CodeInfo(_E, 'Card brand not supported'),
    '7010': CodeInfo(_T, 'Infrastructure error'),
    '7011': CodeInfo(_T, 'Communication error with processor'),
    '9999': CodeInfo(_T, 'Unknown technical error'),
}

SUCCESS_CODE = '0000'


def lookup_code(status_code: str | None) -> CodeInfo:
    if not status_code:
        return CodeInfo(ResponseCodeType.UNKNOWN, 'Unknown status')
    return RESPONSE_CODES.get(
        status_code, CodeInfo(ResponseCodeType.UNKNOWN, f'Unknown code: {status_code}')
    )
