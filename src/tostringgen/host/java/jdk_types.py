"""
Known JDK types and their direct supertypes.

Types declared in the file being edited are resolved from source; everything
else the resolver can answer comes from this table. Anything missing here
resolves as unknown, which makes the classifier fall back to plain objects.
"""

PRIMITIVE_TYPES = frozenset(
    {"boolean", "byte", "char", "short", "int", "long", "float", "double"}
)

OBJECT = "java.lang.Object"

# qualified name -> direct supertypes (java.lang.Object is implied for all)
JDK_SUPERTYPES: dict[str, tuple[str, ...]] = {
    # java.lang
    "java.lang.Object": (),
    "java.lang.CharSequence": (),
    "java.lang.Comparable": (),
    "java.lang.Cloneable": (),
    "java.lang.Iterable": (),
    "java.lang.Runnable": (),
    "java.lang.AutoCloseable": (),
    "java.lang.String": ("java.lang.CharSequence", "java.lang.Comparable", "java.io.Serializable"),
    "java.lang.StringBuilder": ("java.lang.CharSequence", "java.io.Serializable"),
    "java.lang.StringBuffer": ("java.lang.CharSequence", "java.io.Serializable"),
    "java.lang.Boolean": ("java.io.Serializable", "java.lang.Comparable"),
    "java.lang.Character": ("java.io.Serializable", "java.lang.Comparable"),
    "java.lang.Number": ("java.io.Serializable",),
    "java.lang.Byte": ("java.lang.Number", "java.lang.Comparable"),
    "java.lang.Short": ("java.lang.Number", "java.lang.Comparable"),
    "java.lang.Integer": ("java.lang.Number", "java.lang.Comparable"),
    "java.lang.Long": ("java.lang.Number", "java.lang.Comparable"),
    "java.lang.Float": ("java.lang.Number", "java.lang.Comparable"),
    "java.lang.Double": ("java.lang.Number", "java.lang.Comparable"),
    "java.lang.Void": (),
    "java.lang.Class": ("java.io.Serializable",),
    "java.lang.Enum": ("java.lang.Comparable", "java.io.Serializable"),
    "java.lang.Thread": ("java.lang.Runnable",),
    "java.lang.Throwable": ("java.io.Serializable",),
    "java.lang.Exception": ("java.lang.Throwable",),
    "java.lang.Error": ("java.lang.Throwable",),
    "java.lang.RuntimeException": ("java.lang.Exception",),
    "java.lang.IllegalArgumentException": ("java.lang.RuntimeException",),
    "java.lang.IllegalStateException": ("java.lang.RuntimeException",),
    "java.lang.NullPointerException": ("java.lang.RuntimeException",),
    "java.lang.UnsupportedOperationException": ("java.lang.RuntimeException",),
    "java.lang.IndexOutOfBoundsException": ("java.lang.RuntimeException",),
    "java.lang.ClassCastException": ("java.lang.RuntimeException",),
    "java.lang.ArithmeticException": ("java.lang.RuntimeException",),
    "java.lang.NumberFormatException": ("java.lang.IllegalArgumentException",),
    "java.lang.CloneNotSupportedException": ("java.lang.Exception",),
    "java.lang.InterruptedException": ("java.lang.Exception",),
    # java.io
    "java.io.Serializable": (),
    "java.io.Closeable": ("java.lang.AutoCloseable",),
    "java.io.File": ("java.io.Serializable", "java.lang.Comparable"),
    "java.io.IOException": ("java.lang.Exception",),
    "java.io.FileNotFoundException": ("java.io.IOException",),
    "java.io.UncheckedIOException": ("java.lang.RuntimeException",),
    # java.math
    "java.math.BigDecimal": ("java.lang.Number", "java.lang.Comparable"),
    "java.math.BigInteger": ("java.lang.Number", "java.lang.Comparable"),
    "java.math.RoundingMode": ("java.lang.Enum",),
    # java.util collections
    "java.util.Collection": ("java.lang.Iterable",),
    "java.util.List": ("java.util.Collection",),
    "java.util.Set": ("java.util.Collection",),
    "java.util.SortedSet": ("java.util.Set",),
    "java.util.NavigableSet": ("java.util.SortedSet",),
    "java.util.Queue": ("java.util.Collection",),
    "java.util.Deque": ("java.util.Queue",),
    "java.util.AbstractCollection": ("java.util.Collection",),
    "java.util.AbstractList": ("java.util.AbstractCollection", "java.util.List"),
    "java.util.AbstractSet": ("java.util.AbstractCollection", "java.util.Set"),
    "java.util.ArrayList": ("java.util.AbstractList", "java.util.List", "java.io.Serializable", "java.lang.Cloneable"),
    "java.util.LinkedList": ("java.util.AbstractList", "java.util.List", "java.util.Deque", "java.io.Serializable"),
    "java.util.Vector": ("java.util.AbstractList", "java.util.List", "java.io.Serializable"),
    "java.util.Stack": ("java.util.Vector",),
    "java.util.HashSet": ("java.util.AbstractSet", "java.util.Set", "java.io.Serializable"),
    "java.util.LinkedHashSet": ("java.util.HashSet",),
    "java.util.TreeSet": ("java.util.AbstractSet", "java.util.NavigableSet", "java.io.Serializable"),
    "java.util.EnumSet": ("java.util.AbstractSet",),
    "java.util.ArrayDeque": ("java.util.AbstractCollection", "java.util.Deque", "java.io.Serializable"),
    "java.util.PriorityQueue": ("java.util.AbstractCollection", "java.util.Queue", "java.io.Serializable"),
    "java.util.Map": (),
    "java.util.SortedMap": ("java.util.Map",),
    "java.util.NavigableMap": ("java.util.SortedMap",),
    "java.util.AbstractMap": ("java.util.Map",),
    "java.util.HashMap": ("java.util.AbstractMap", "java.util.Map", "java.io.Serializable"),
    "java.util.LinkedHashMap": ("java.util.HashMap",),
    "java.util.TreeMap": ("java.util.AbstractMap", "java.util.NavigableMap", "java.io.Serializable"),
    "java.util.Hashtable": ("java.util.Map", "java.io.Serializable"),
    "java.util.Properties": ("java.util.Hashtable",),
    "java.util.IdentityHashMap": ("java.util.AbstractMap", "java.util.Map"),
    "java.util.WeakHashMap": ("java.util.AbstractMap", "java.util.Map"),
    "java.util.EnumMap": ("java.util.AbstractMap", "java.io.Serializable"),
    "java.util.Iterator": (),
    "java.util.Optional": (),
    "java.util.UUID": ("java.io.Serializable", "java.lang.Comparable"),
    "java.util.Locale": ("java.io.Serializable",),
    "java.util.Objects": (),
    "java.util.Arrays": (),
    "java.util.Collections": (),
    "java.util.Date": ("java.io.Serializable", "java.lang.Cloneable", "java.lang.Comparable"),
    "java.util.Calendar": ("java.io.Serializable", "java.lang.Cloneable", "java.lang.Comparable"),
    "java.util.GregorianCalendar": ("java.util.Calendar",),
    "java.util.concurrent.ConcurrentMap": ("java.util.Map",),
    "java.util.concurrent.ConcurrentHashMap": ("java.util.AbstractMap", "java.util.concurrent.ConcurrentMap"),
    "java.util.concurrent.CopyOnWriteArrayList": ("java.util.List", "java.io.Serializable"),
    "java.util.concurrent.TimeUnit": ("java.lang.Enum",),
    "java.util.concurrent.atomic.AtomicInteger": ("java.lang.Number",),
    "java.util.concurrent.atomic.AtomicLong": ("java.lang.Number",),
    "java.util.concurrent.atomic.AtomicBoolean": ("java.io.Serializable",),
    # java.sql
    "java.sql.Date": ("java.util.Date",),
    "java.sql.Time": ("java.util.Date",),
    "java.sql.Timestamp": ("java.util.Date",),
    "java.sql.SQLException": ("java.lang.Exception",),
    # java.time
    "java.time.LocalDate": ("java.lang.Comparable", "java.io.Serializable"),
    "java.time.LocalDateTime": ("java.lang.Comparable", "java.io.Serializable"),
    "java.time.LocalTime": ("java.lang.Comparable", "java.io.Serializable"),
    "java.time.Instant": ("java.lang.Comparable", "java.io.Serializable"),
    "java.time.Duration": ("java.lang.Comparable", "java.io.Serializable"),
    "java.time.ZonedDateTime": ("java.lang.Comparable", "java.io.Serializable"),
    "java.time.DayOfWeek": ("java.lang.Enum",),
    "java.time.Month": ("java.lang.Enum",),
    # logging
    "java.util.logging.Logger": (),
}

JDK_ENUMS = frozenset(
    name for name, supers in JDK_SUPERTYPES.items() if "java.lang.Enum" in supers
)

# Simple names visible without an import
JAVA_LANG = {
    name.rsplit(".", 1)[1]: name
    for name in JDK_SUPERTYPES
    if name.startswith("java.lang.") and name.count(".") == 2
}

