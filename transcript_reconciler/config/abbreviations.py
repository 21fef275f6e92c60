"""
False sentence terminator tables.

Speech recognizers insert periods after abbreviations, inside numbers and
after list markers. The tables below are the data consumed by
SentenceTerminatorClassifier; extend them here rather than in scanning code.
"""

from typing import Tuple

# Titles/honorifics
TITLE_ABBREVIATIONS: Tuple[str, ...] = (
    'Dr.', 'Mr.', 'Mrs.', 'Ms.', 'Prof.', 'Sr.', 'Jr.', 'Drs.',
)

# Business/legal
BUSINESS_ABBREVIATIONS: Tuple[str, ...] = (
    'Inc.', 'Corp.', 'Ltd.', 'Co.', 'LLC.', 'L.L.C.', 'P.C.', 'L.P.', 'LP.',
)

# Academic degrees
DEGREE_ABBREVIATIONS: Tuple[str, ...] = (
    'Ph.D.', 'M.D.', 'B.A.', 'M.A.', 'M.S.', 'B.S.', 'M.B.A.', 'J.D.', 'LL.M.',
    'D.D.S.', 'Pharm.D.', 'Ed.D.', 'Psy.D.',
)

# Latin/English shorthand
COMMON_ABBREVIATIONS: Tuple[str, ...] = (
    'etc.', 'vs.', 'e.g.', 'i.e.', 'cf.', 'viz.', 'et al.', 'ibid.',
)

# Countries, organizations and US states
GEOGRAPHIC_ABBREVIATIONS: Tuple[str, ...] = (
    'U.S.', 'U.K.', 'U.N.', 'E.U.', 'N.Y.', 'L.A.', 'D.C.', 'N.J.', 'Ca.',
    'N.H.', 'R.I.', 'Mass.', 'Conn.', 'Del.', 'Md.', 'Va.', 'N.C.', 'S.C.',
    'Ga.', 'Fla.', 'Ala.', 'Miss.', 'Tenn.', 'Ky.', 'Ind.', 'Ill.',
    'Mich.', 'Wis.', 'Minn.', 'Mo.', 'Ark.', 'La.', 'Okla.', 'Tex.',
    'N.M.', 'Ariz.', 'Colo.', 'Nev.', 'Calif.', 'Ore.', 'Wash.',
)

# Months, weekdays and time of day
CALENDAR_ABBREVIATIONS: Tuple[str, ...] = (
    'Jan.', 'Feb.', 'Mar.', 'Apr.', 'Jun.', 'Jul.', 'Aug.',
    'Sep.', 'Sept.', 'Oct.', 'Nov.', 'Dec.',
    'Mon.', 'Tue.', 'Wed.', 'Thu.', 'Fri.', 'Sat.', 'Sun.',
    'a.m.', 'p.m.', 'A.M.', 'P.M.',
)

# Measurements/units
UNIT_ABBREVIATIONS: Tuple[str, ...] = (
    'in.', 'ft.', 'yd.', 'mi.', 'oz.', 'lb.', 'lbs.', 'kg.', 'cm.', 'mm.',
    'm.', 'km.', 'mph.', 'kph.', 'sq.', 'cu.',
)

# Currency codes
CURRENCY_ABBREVIATIONS: Tuple[str, ...] = (
    'USD.', 'EUR.', 'GBP.', 'JPY.', 'CAD.', 'AUD.', 'CHF.',
)

# Tech/internet
TECH_ABBREVIATIONS: Tuple[str, ...] = (
    'www.', 'http.', 'https.', 'ftp.', 'IP.', 'URL.', 'HTML.', 'CSS.', 'JS.',
)

# Lists, references and approximations
REFERENCE_ABBREVIATIONS: Tuple[str, ...] = (
    'No.', 'nos.', '#.', 'Vol.', 'Ch.', 'Chap.', 'pg.', 'pp.', 'fig.', 'Fig.',
    'Ref.', 'refs.', 'App.', 'Sec.', 'min.', 'max.', 'approx.', 'est.',
)

ABBREVIATIONS: Tuple[str, ...] = (
    TITLE_ABBREVIATIONS
    + BUSINESS_ABBREVIATIONS
    + DEGREE_ABBREVIATIONS
    + COMMON_ABBREVIATIONS
    + GEOGRAPHIC_ABBREVIATIONS
    + CALENDAR_ABBREVIATIONS
    + UNIT_ABBREVIATIONS
    + CURRENCY_ABBREVIATIONS
    + TECH_ABBREVIATIONS
    + REFERENCE_ABBREVIATIONS
)

# (name, regex) pairs checked in order after the abbreviation table.
# Each pattern is searched against the trimmed candidate span.
FALSE_TERMINATOR_PATTERNS: Tuple[Tuple[str, str], ...] = (
    # "3.5 mi." - a decimal the recognizer split before a trailing word
    ('split_decimal', r'\b\d+\.\d+\s+[A-Za-z]+\.\s*$'),
    # "69.23%."
    ('percentage', r'\d+\.?\d*%\.$'),
    # "3.14." / "3.14"
    ('decimal', r'\b\d+\.\d+\.?$'),
    # "1." through "999."
    ('numbered_list', r'\b\d{1,3}\.$'),
    # "v1.2.3." / "iOS 16.4."
    ('version', r'\b(v|version|iOS|macOS|Android)\s*\d+(\.\d+)+\.$'),
    # "$123.45." / "€99.99."
    ('currency', r'[\$€£¥]\d+\.\d{2}\.$'),
    # "3:30." / "12:45"
    ('clock_time', r'\b\d{1,2}:\d{2}\.?$'),
    # "192.168.1.1."
    ('ipv4', r'\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\.?$'),
    # "6.022e23."
    ('scientific', r'\b\d+\.?\d*[eE][+-]?\d+\.?$'),
)

# Clause breaks used to split an overlong remainder that has no terminator:
# a comma followed by a conjunction or transition word. The split lands
# after the comma.
CLAUSE_BREAK_PATTERN: str = (
    r',\s+(?=(?:and|but|or|so|yet|because|while|when|if|although|since|unless'
    r'|however|therefore|meanwhile|furthermore|moreover|additionally|consequently'
    r'|then|now|next|finally|lastly)\s)'
)

# Capitalized transition words starting a new thought without punctuation.
# The split lands before the transition word.
TRANSITION_PATTERN: str = (
    r'\s+(?=(?:And|But|So|However|Therefore|Meanwhile|Furthermore|Moreover'
    r'|Then|Now|Next|Finally|Additionally)\s)'
)
