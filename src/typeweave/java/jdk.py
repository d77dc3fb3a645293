"""Names of commonly used JDK types, and return types of their common methods.

The resolver treats JDK types as external: their members are never parsed.
The name table backs implicit ``java.lang`` visibility and on-demand imports
such as ``import java.util.*``; the return-type table lets fluent chains like
``builder.append(a).append(b).toString()`` resolve past the first call.
"""

from __future__ import annotations

JDK_TYPES: dict[str, frozenset[str]] = {
    "java.lang": frozenset(
        {
            "AbstractMethodError", "Appendable", "ArithmeticException",
            "ArrayIndexOutOfBoundsException", "ArrayStoreException",
            "AssertionError", "AutoCloseable", "Boolean", "Byte", "CharSequence",
            "Character", "Class", "ClassCastException", "ClassLoader",
            "ClassNotFoundException", "CloneNotSupportedException", "Cloneable",
            "Comparable", "Deprecated", "Double", "Enum", "Error", "Exception",
            "Float", "FunctionalInterface", "IllegalAccessException",
            "IllegalArgumentException", "IllegalStateException",
            "IndexOutOfBoundsException", "InterruptedException", "Integer",
            "Iterable", "Long", "Math", "NegativeArraySizeException",
            "NoSuchFieldException", "NoSuchMethodException", "NullPointerException",
            "Number", "NumberFormatException", "Object", "OutOfMemoryError",
            "Override", "Process", "ProcessBuilder", "Record", "Runnable",
            "Runtime", "RuntimeException", "SafeVarargs", "SecurityException",
            "Short", "StackOverflowError", "StrictMath", "String", "StringBuffer",
            "StringBuilder", "StringIndexOutOfBoundsException", "SuppressWarnings",
            "System", "Thread", "ThreadLocal", "Throwable",
            "UnsupportedOperationException", "Void",
        }
    ),
    "java.util": frozenset(
        {
            "AbstractList", "AbstractMap", "AbstractSet", "ArrayDeque", "ArrayList",
            "Arrays", "BitSet", "Calendar", "Collection", "Collections",
            "Comparator", "ConcurrentModificationException", "Date", "Deque",
            "EnumMap", "EnumSet", "HashMap", "HashSet", "Iterator", "LinkedHashMap",
            "LinkedHashSet", "LinkedList", "List", "ListIterator", "Locale", "Map",
            "NavigableMap", "NavigableSet", "NoSuchElementException", "Objects",
            "Optional", "OptionalDouble", "OptionalInt", "OptionalLong",
            "PriorityQueue", "Properties", "Queue", "Random", "Scanner", "Set",
            "SortedMap", "SortedSet", "Stack", "StringJoiner", "Timer", "TreeMap",
            "TreeSet", "UUID", "Vector", "WeakHashMap",
        }
    ),
    "java.util.function": frozenset(
        {
            "BiConsumer", "BiFunction", "BiPredicate", "BinaryOperator",
            "BooleanSupplier", "Consumer", "DoubleFunction", "DoubleSupplier",
            "Function", "IntFunction", "IntPredicate", "IntSupplier",
            "IntUnaryOperator", "LongSupplier", "Predicate", "Supplier",
            "ToDoubleFunction", "ToIntFunction", "ToLongFunction", "UnaryOperator",
        }
    ),
    "java.util.stream": frozenset(
        {"Collector", "Collectors", "DoubleStream", "IntStream", "LongStream", "Stream"}
    ),
    "java.util.concurrent": frozenset(
        {
            "Callable", "CompletableFuture", "ConcurrentHashMap", "ConcurrentMap",
            "CopyOnWriteArrayList", "CountDownLatch", "ExecutionException",
            "Executor", "ExecutorService", "Executors", "Future",
            "ScheduledExecutorService", "TimeUnit", "TimeoutException",
        }
    ),
    "java.io": frozenset(
        {
            "BufferedReader", "BufferedWriter", "Closeable", "File",
            "FileInputStream", "FileNotFoundException", "FileOutputStream",
            "FileReader", "FileWriter", "IOException", "InputStream",
            "InputStreamReader", "OutputStream", "OutputStreamWriter",
            "PrintStream", "PrintWriter", "Reader", "Serializable",
            "UncheckedIOException", "Writer",
        }
    ),
    "java.nio.file": frozenset({"Files", "Path", "Paths", "StandardOpenOption"}),
    "java.math": frozenset({"BigDecimal", "BigInteger", "RoundingMode"}),
    "java.time": frozenset(
        {
            "Duration", "Instant", "LocalDate", "LocalDateTime", "LocalTime",
            "Period", "ZoneId", "ZonedDateTime",
        }
    ),
}


def is_known(qualified_name: str) -> bool:
    package, _, name = qualified_name.rpartition(".")
    return name in JDK_TYPES.get(package, ())


def java_lang(name: str) -> str | None:
    """Qualified name of *name* when it is implicitly visible from java.lang."""
    if name in JDK_TYPES["java.lang"]:
        return f"java.lang.{name}"
    return None


# Return types of common JDK methods, so that chained calls keep resolving.
# SELF stands for the receiver's own type.
SELF = "<self>"

_OBJECT_METHODS = {
    "equals": "boolean",
    "getClass": "java.lang.Class",
    "hashCode": "int",
    "toString": "java.lang.String",
}

_BUILDER_METHODS = {
    "append": SELF,
    "charAt": "char",
    "delete": SELF,
    "deleteCharAt": SELF,
    "indexOf": "int",
    "insert": SELF,
    "length": "int",
    "replace": SELF,
    "reverse": SELF,
    "setLength": "void",
    "substring": "java.lang.String",
}

_COLLECTION_METHODS = {
    "clear": "void",
    "contains": "boolean",
    "isEmpty": "boolean",
    "size": "int",
    "stream": "java.util.stream.Stream",
}

_MAP_METHODS = {
    "clear": "void",
    "containsKey": "boolean",
    "containsValue": "boolean",
    "entrySet": "java.util.Set",
    "isEmpty": "boolean",
    "keySet": "java.util.Set",
    "size": "int",
    "values": "java.util.Collection",
}

_STREAM_METHODS = {
    "allMatch": "boolean",
    "anyMatch": "boolean",
    "count": "long",
    "distinct": SELF,
    "filter": SELF,
    "forEach": "void",
    "limit": SELF,
    "noneMatch": "boolean",
    "peek": SELF,
    "skip": SELF,
    "sorted": SELF,
    "toList": "java.util.List",
}

RETURN_TYPES: dict[str, dict[str, str]] = {
    "java.lang.String": {
        "charAt": "char",
        "compareTo": "int",
        "concat": "java.lang.String",
        "contains": "boolean",
        "endsWith": "boolean",
        "equalsIgnoreCase": "boolean",
        "format": "java.lang.String",
        "formatted": "java.lang.String",
        "indexOf": "int",
        "isBlank": "boolean",
        "isEmpty": "boolean",
        "join": "java.lang.String",
        "lastIndexOf": "int",
        "length": "int",
        "matches": "boolean",
        "repeat": "java.lang.String",
        "replace": "java.lang.String",
        "replaceAll": "java.lang.String",
        "split": "java.lang.String[]",
        "startsWith": "boolean",
        "strip": "java.lang.String",
        "substring": "java.lang.String",
        "toCharArray": "char[]",
        "toLowerCase": "java.lang.String",
        "toUpperCase": "java.lang.String",
        "trim": "java.lang.String",
        "valueOf": "java.lang.String",
    },
    "java.lang.StringBuilder": _BUILDER_METHODS,
    "java.lang.StringBuffer": _BUILDER_METHODS,
    "java.util.stream.Stream": _STREAM_METHODS,
    "java.util.Optional": {"isEmpty": "boolean", "isPresent": "boolean"},
    **{
        f"java.util.{name}": _COLLECTION_METHODS
        for name in (
            "ArrayDeque", "ArrayList", "Collection", "Deque", "HashSet",
            "LinkedHashSet", "LinkedList", "List", "Queue", "Set", "SortedSet",
            "TreeSet",
        )
    },
    **{
        f"java.util.{name}": _MAP_METHODS
        for name in ("HashMap", "LinkedHashMap", "Map", "SortedMap", "TreeMap")
    },
}


def return_type(qualified_name: str, method: str) -> str | None:
    """Return type of *method* on a JDK type, or None when it is not tabled."""
    known = RETURN_TYPES.get(qualified_name, {}).get(method)
    return known or _OBJECT_METHODS.get(method)
